from __future__ import annotations

import os
from dataclasses import dataclass

import typer

from prdoc.core.config import Config, find_config, load_config
from prdoc.core.errors import ErrorCode
from prdoc.core.result import Err
from prdoc.output.console import ConsoleProtocol, RichConsole
from prdoc.records.parser import ParseOptions

VERBOSE_ENV_VAR = "PRDOC_VERBOSE"


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    console: ConsoleProtocol
    verbose: bool = False

    @property
    def parse_options(self) -> ParseOptions:
        return ParseOptions.from_config(self.config.records)


def build_context() -> CLIContext:
    console = RichConsole()
    config = Config()

    path = find_config()
    if path is not None:
        result = load_config(path)
        if isinstance(result, Err):
            console.error(result.error.message)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
        config = result.value

    return CLIContext(
        config=config,
        console=console,
        verbose=os.environ.get(VERBOSE_ENV_VAR) == "1",
    )
