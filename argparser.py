import argparse
from pathlib import Path
from omegaconf import DictConfig, ListConfig, OmegaConf

class BlockStageArgumentParser:
    """
    Argument parser for the BlockStage headless runner.

    Loads a project file (sprites and their block programs), runs it on a virtual
    stage and records what the sprites did.
    """

    def __init__(self, project_root: Path | str, description: str = None):
        """
        Initializes the argument parser.

        Args:
            project_root: The root directory of the project.
            description: The description of the parser (uses default if None).
        """
        if description is None:
            description = (
                "BlockStage: run Scratch-style block programs headless\n\n"
                "Each sprite's program starts at its 'When clicked' block. The run stops after\n"
                "the configured auto-stop time; snapshots of every sprite are written to trace.json.\n\n"
                "Example: python main.py -p configs/projects/head_on.yaml --output results/head_on"
            )
        self.parser = argparse.ArgumentParser(
            description=description,
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        self.project_root = Path(project_root)
        self._add_common_arguments()

    def _add_common_arguments(self) -> None:
        self.parser.add_argument(
            "-p",
            "--project",
            type=str,
            help="Project file (.yaml or .json) describing sprites and their blocks.",
            default=None
        )

        self.parser.add_argument(
            "-c",
            "--config",
            type=str,
            help="Stage configuration file. Default: configs/stage/stage_config.yaml",
            default=None
        )

        self.parser.add_argument(
            "--output",
            type=str,
            help="Directory where stage.log and trace.json are written.",
            default=None
        )

        self.parser.add_argument(
            "--auto-stop",
            type=float,
            help="Stop the run after this many seconds (overrides config).",
            default=None
        )

        self.parser.add_argument(
            "--until-finished",
            action="store_true",
            help="Ignore the auto-stop cap and run until every sprite has finished."
        )

        self.parser.add_argument(
            "--speed",
            type=float,
            help="Time scale for engine timings (Say durations are not scaled); 2 runs twice as fast. Default: 1",
            default=1.0
        )

    def parse_args(self, argv=None):
        return self.parser.parse_args(argv)

    def get_config(self, args) -> DictConfig | ListConfig:
        """
        Creates a configuration object from the parsed arguments.

        Args:
            args: The parsed arguments.

        Returns:
            The configuration object.
        """
        config_path = Path(args.config) if args.config else self.project_root / "configs" / "stage" / "stage_config.yaml"
        cfg = OmegaConf.load(config_path)

        if args.project:
            cfg.execution.project = args.project
        if args.output:
            cfg.execution.result_dir = args.output
        if args.auto_stop is not None:
            cfg.engine.auto_stop = args.auto_stop
        if args.until_finished:
            cfg.engine.auto_stop = None

        if args.speed <= 0:
            self.parser.error("--speed must be positive")
        if args.speed != 1.0:
            for key in ("step_delay", "tick_interval", "collision_cooldown", "auto_stop"):
                if cfg.engine.get(key) is not None:
                    cfg.engine[key] = float(cfg.engine[key]) / args.speed
            cfg.execution.frame_interval = float(cfg.execution.frame_interval) / args.speed

        return cfg
