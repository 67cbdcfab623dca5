"""Centralized color definitions for pmctl output.

Colors are applied with click.style so that click.echo strips them when the
output is not a terminal or when color is disabled.
"""

from typing import Literal

import click

from pmctl.core.dispatcher import Severity
from pmctl.domain.entities import ProcessStatus

ClickColor = Literal["black", "red", "green", "yellow", "blue", "magenta", "cyan", "white"]


class PmctlColors:
    """Color palette for tables and command reports."""

    NAME_FG: ClickColor = "cyan"
    KEY_FG: ClickColor = "green"
    RUNNING_FG: ClickColor = "green"
    NOT_RUNNING_FG: ClickColor = "red"

    SEVERITY_FG: dict[Severity, ClickColor] = {
        Severity.INFO: "green",
        Severity.WARNING: "yellow",
        Severity.ERROR: "red",
        Severity.FATAL: "red",
    }

    SEVERITY_LABEL: dict[Severity, str] = {
        Severity.INFO: "✓",
        Severity.WARNING: "Warning:",
        Severity.ERROR: "Error:",
        Severity.FATAL: "Fatal:",
    }


def style_name(name: str) -> str:
    return click.style(name, fg=PmctlColors.NAME_FG)


def style_key(key: str) -> str:
    return click.style(key, fg=PmctlColors.KEY_FG)


def style_status(status: ProcessStatus) -> str:
    fg = PmctlColors.RUNNING_FG if status is ProcessStatus.RUNNING else PmctlColors.NOT_RUNNING_FG
    return click.style(status.value, fg=fg)


def style_severity_label(severity: Severity) -> str:
    return click.style(
        PmctlColors.SEVERITY_LABEL[severity],
        fg=PmctlColors.SEVERITY_FG[severity],
        bold=severity is Severity.FATAL,
    )
