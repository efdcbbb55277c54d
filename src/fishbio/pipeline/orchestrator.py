"""Batch pipeline orchestration.

Loads the observation table, computes every requested summary, and only then
writes CSV tables, figures and the resolved configuration.
"""

import time
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

import pandas as pd

from fishbio.contracts import InvalidConfiguration
from fishbio.pipeline.processor import SummaryProcessor
from fishbio.setup_directories import (
    get_log_path,
    get_plot_path,
    get_summary_path,
    make_run_id,
    setup_output_directories,
)
from fishbio.summary.loader import ObservationLoader
from fishbio.visualization.plotter import SummaryPlotter

if TYPE_CHECKING:
    from fishbio.schemas import InternalConfig

__all__ = ['SummaryOrchestrator']

logger = logging.getLogger(__name__)


class SummaryOrchestrator:
    """Runs the summary pipeline once, end to end.

    **Stages:**

    1. **Load**: read the input CSV through ObservationLoader (column
       mapping, monthly dates, date window, required-column checks).
    2. **Summarize**: run every analysis in ``config.analyses`` through
       SummaryProcessor. Contracts are checked at each stage boundary.
    3. **Persist**: write ``summaries/<analysis>*.csv``,
       ``runtime_config.json`` and, when enabled, ``plots/<analysis>*.png``.

    Stage 3 starts only after stage 2 finished for every analysis, so a fatal
    error (InvalidConfiguration, MissingCategory, ContractViolation) leaves
    no partial summaries behind.

    **Logging:**

    All output goes to both console and ``logs/fishbio_<run_id>.log``. Log
    level comes from ``config.logging.level``.

    Example usage::

        from fishbio.schemas import resolve_config, ParamConfig, UserConfig

        config = resolve_config(ParamConfig(), UserConfig(INPUT_PATH="fish.csv"))
        orch = SummaryOrchestrator(config)
        results = orch.run()
    """

    def __init__(self, config: "InternalConfig", output_dirs: Optional[dict] = None):
        """Initialize orchestrator.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.
        output_dirs : dict, optional
            Paths from ``setup_output_directories()``. Created from
            ``config.base_dir`` when not given.
        """
        self.config = config
        self.output_dirs = output_dirs or setup_output_directories(config.base_dir)
        self.run_id = config.run_id or make_run_id()
        self.processor = SummaryProcessor(config)
        self.written: list[Path] = []
        self._handlers: list[logging.Handler] = []

    def _setup_logging(self):
        """Configure root logger with file and console handlers.

        Log level and paths derived from config.
        """
        log_level = getattr(logging, self.config.logging.level, logging.INFO)
        log_path = get_log_path(self.output_dirs, self.run_id)

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        # Clear existing handlers and add new ones
        root = logging.getLogger()
        root.setLevel(log_level)
        for handler in root.handlers[:]:
            root.removeHandler(handler)

        # File handler
        fh = logging.FileHandler(log_path)
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        root.addHandler(fh)

        # Console handler
        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        self._handlers = [fh, ch]
        logger.info("Logging: level=%s, file=%s", self.config.logging.level, log_path)

    def _teardown_logging(self):
        root = logging.getLogger()
        for handler in self._handlers:
            root.removeHandler(handler)
            handler.close()
        self._handlers = []

    def load(self) -> pd.DataFrame:
        """Read and prepare the configured input file."""
        if not self.config.input_path:
            raise InvalidConfiguration("No input file configured (INPUT_PATH or --input)")
        loader = ObservationLoader(self.config)
        return loader.load(self.config.input_path)

    def summarize(self, df: pd.DataFrame) -> dict[str, Any]:
        """Compute every configured analysis. Nothing is written here."""
        return {analysis: self.processor.run(df, analysis) for analysis in self.config.analyses}

    def run(self, df: Optional[pd.DataFrame] = None) -> dict[str, Any]:
        """Run the pipeline.

        Parameters
        ----------
        df : pd.DataFrame, optional
            Already prepared observations. Read from ``config.input_path``
            when not given.

        Returns
        -------
        dict
            Analysis name -> summary result.

        Raises
        ------
        InvalidConfiguration, MissingCategory, ContractViolation
            Fatal; raised before any summary file is written.
        """
        self._setup_logging()
        started = time.time()

        logger.info("=" * 60)
        logger.info("Starting fishbio summary run %s", self.run_id)
        logger.info("Analyses: %s", ", ".join(self.config.analyses))
        logger.info("=" * 60)

        try:
            if df is None:
                df = self.load()
            results = self.summarize(df)

            excluded = self.processor.summarizer.summary_counts()
            if excluded:
                logger.info("Excluded rows by column: %s", excluded)

            self._write_tables(results)
            self._write_runtime_config()
            if self.config.visualization.enabled:
                self._write_plots(results, df)

            logger.info("=" * 60)
            logger.info("Run finished in %.1f seconds, %d files written", time.time() - started, len(self.written))
            logger.info("=" * 60)
            return results
        except Exception:
            logger.exception("Summary run failed")
            raise
        finally:
            self._teardown_logging()

    def _write_tables(self, results: dict[str, Any]):
        for analysis, result in results.items():
            for suffix, table in self.processor.tables(analysis, result).items():
                path = get_summary_path(self.output_dirs, analysis, suffix)
                table.to_csv(path, index=False)
                self.written.append(path)
                logger.info("Summary saved: %s (%d rows)", path.name, len(table))

    def _write_runtime_config(self):
        path = Path(self.output_dirs["base"]) / "runtime_config.json"
        path.write_text(self.config.model_dump_json(indent=2))
        self.written.append(path)

    def _write_plots(self, results: dict[str, Any], df: pd.DataFrame):
        plotter = SummaryPlotter(self.config)
        fmt = self.config.visualization.output_format
        renderers = {
            "gsi": plotter.plot_gsi,
            "length_frequency": plotter.plot_length_frequency,
            "maturity": plotter.plot_maturity,
            "province_species": plotter.plot_province_pies,
        }
        for analysis, result in results.items():
            path = get_plot_path(self.output_dirs, analysis, fmt)
            if analysis == "length_weight":
                observations = df
                if self.config.length_weight.by == "sex":
                    observations = self.processor.summarizer.recode(df, "sex")
                saved = plotter.plot_length_weight(result, path, observations=observations)
            else:
                saved = renderers[analysis](result, path)
            self.written.append(Path(saved))
