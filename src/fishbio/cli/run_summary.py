"""Core summary pipeline execution logic.

This module contains the actual pipeline runner, separated from argument parsing.
Scripts are thin wrappers; this is the real implementation.
"""

import argparse
import json
import logging
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any

from fishbio.setup_directories import setup_output_directories
from fishbio.pipeline.orchestrator import SummaryOrchestrator
from fishbio.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig, ALL_ANALYSES


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def run_summary_pipeline(
    user_config_path: str,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False
) -> dict:
    """Execute the summary pipeline once.

    1. Loads and resolves configuration (Param < User < CLI)
    2. Sets up output directories
    3. Runs the orchestrator (load, summarize, persist, plot)

    Parameters
    ----------
    user_config_path : str
        Path to user config file (Python file with CONFIG dict).

    cli_args : dict, optional
        CLI argument overrides. Keys: input_path, analyses, class_interval,
        base_dir, start, end, plots, log_level. All optional.

    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    dict
        Analysis name -> summary result.

    Raises
    ------
    FileNotFoundError
        If the config or input file does not exist.
    ValueError
        If configuration validation fails (pydantic ValidationError,
        InvalidConfiguration).

    Examples
    --------
    Run with user config only::

        run_summary_pipeline("config/survey_2020.py")

    Run with CLI overrides::

        run_summary_pipeline(
            "config/survey_2020.py",
            cli_args={"analyses": ["maturity"], "class_interval": 5},
        )
    """
    param_cfg = ParamConfig()  # Expert defaults

    user_cfg_dict = load_user_config_dict(user_config_path)
    user_cfg = UserConfig.model_validate(user_cfg_dict)

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    # Resolve to internal config (Param < User < CLI)
    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    output_dirs = setup_output_directories(config.base_dir)

    print(f"\n{'='*60}")
    print("fishbio Summary Pipeline")
    print('='*60)
    print(f"Config:   {user_config_path}")
    print(f"Input:    {config.input_path}")
    print(f"Analyses: {', '.join(config.analyses)}")
    print(f"Output:   {output_dirs['base']}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(), indent=2))
        print('='*60)

    orchestrator = SummaryOrchestrator(config, output_dirs)
    return orchestrator.run()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarize fisheries-biology observations")
    parser.add_argument("config", help="Path to user config file")
    parser.add_argument("--input", dest="input_path", help="Observation CSV")
    parser.add_argument("--analysis", dest="analyses", nargs="+", choices=ALL_ANALYSES,
                        help="Analyses to run")
    parser.add_argument("--class-interval", type=float, help="Length-frequency bin width")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--start", help="First month, YYYY-MM")
    parser.add_argument("--end", help="Last month, YYYY-MM")
    parser.add_argument("--no-plots", dest="plots", action="store_false", default=None,
                        help="Write tables only")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    cli_args = {
        "input_path": args.input_path,
        "analyses": args.analyses,
        "class_interval": args.class_interval,
        "base_dir": args.base_dir,
        "start": args.start,
        "end": args.end,
        "plots": args.plots,
    }
    run_summary_pipeline(args.config, cli_args=cli_args, verbose=args.verbose)
