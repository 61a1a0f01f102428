# spark_bootstrap/spark_env.py
# -*- coding: utf-8 -*-
"""
Structured editing of the shell environment file sourced by Spark (spark-env.sh).

The file is parsed into an ordered list of lines where variable assignments
(`VAR=value` or `export VAR="value"`) are recognised and everything else is
kept verbatim. A variable can then be changed and the file written back.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple, Union

from bootstrap_common.command_utils import get_symbols, log_bootstrap
from bootstrap_common.file_utils import backup_file
from spark_bootstrap.config_models import AppSettings
from spark_bootstrap.exceptions import ConfigFileError

module_logger = logging.getLogger(__name__)

_ASSIGNMENT_RE = re.compile(
    r"^(?P<indent>\s*)(?P<export>export\s+)?(?P<key>[A-Za-z_][A-Za-z0-9_]*)=(?P<value>.*)$"
)


@dataclass
class Assignment:
    key: str
    value: str
    exported: bool = True
    indent: str = ""
    quote: str = '"'
    original: Optional[str] = None

    def render(self) -> str:
        if self.original is not None:
            return self.original
        prefix = "export " if self.exported else ""
        return f"{self.indent}{prefix}{self.key}={_quote(self.value, self.quote)}"


def _unquote(raw: str) -> Tuple[str, str]:
    """Split a raw assignment value into its text and the quote character used."""
    raw = raw.strip()
    if len(raw) >= 2 and raw[0] == raw[-1] == "'":
        return raw[1:-1], "'"
    if len(raw) >= 2 and raw[0] == raw[-1] == '"':
        return raw[1:-1].replace('\\"', '"'), '"'
    return raw, ""


def _quote(value: str, quote: str) -> str:
    # Single-quoted text is literal; it keeps single quotes unless it now
    # contains one, in which case every shell-active character is escaped.
    if quote == "'":
        if "'" not in value:
            return f"'{value}'"
        escaped = re.sub(r'([\\$`"])', r"\\\1", value)
        return f'"{escaped}"'
    escaped = value.replace('"', '\\"')
    return f'"{escaped}"'


class ShellEnvFile:
    """An ordered view of a shell env file with editable variable assignments."""

    def __init__(self, lines: Optional[List[Union[str, Assignment]]] = None):
        self.lines: List[Union[str, Assignment]] = lines if lines is not None else []

    @classmethod
    def parse(cls, text: str) -> "ShellEnvFile":
        lines: List[Union[str, Assignment]] = []
        for raw_line in text.splitlines():
            match = _ASSIGNMENT_RE.match(raw_line)
            if match:
                value, quote = _unquote(match.group("value"))
                lines.append(
                    Assignment(
                        key=match.group("key"),
                        value=value,
                        quote=quote,
                        exported=bool(match.group("export")),
                        indent=match.group("indent"),
                        original=raw_line,
                    )
                )
            else:
                lines.append(raw_line)
        return cls(lines)

    @classmethod
    def load(cls, path: Path) -> "ShellEnvFile":
        return cls.parse(path.read_text(encoding="utf-8", errors="surrogateescape"))

    def _assignments(self, key: str) -> List[Assignment]:
        return [line for line in self.lines if isinstance(line, Assignment) and line.key == key]

    def get(self, key: str) -> Optional[str]:
        """Value of the last assignment to `key`, the one the shell ends up with."""
        matches = self._assignments(key)
        return matches[-1].value if matches else None

    def set(self, key: str, value: str) -> None:
        matches = self._assignments(key)
        if matches:
            matches[-1].value = value
            matches[-1].original = None
        else:
            self.lines.append(Assignment(key=key, value=value))

    def prepend_path_entry(self, key: str, entry: str, separator: str = ":") -> str:
        """
        Put `entry` at the front of a separator-delimited variable.

        An existing copy of the entry is moved rather than duplicated. Returns
        the new value.
        """
        current = self.get(key) or ""
        entries = [e for e in current.split(separator) if e and e != entry]
        new_value = separator.join([entry] + entries)
        self.set(key, new_value)
        return new_value

    def render(self) -> str:
        rendered = [line.render() if isinstance(line, Assignment) else line for line in self.lines]
        return "\n".join(rendered) + "\n"

    def save(self, path: Path) -> None:
        path.write_text(self.render(), encoding="utf-8", errors="surrogateescape")


def prepend_to_classpath(
    env_file: Path,
    entry: str,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Back up the Spark env file and put `entry` first on its classpath variable.

    Returns:
        The new classpath value.

    Raises:
        ConfigFileError: If the env file does not exist.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not env_file.is_file():
        raise ConfigFileError(f"Spark environment file {env_file} does not exist")

    backup_file(env_file, app_settings, logger_to_use)
    shell_env = ShellEnvFile.load(env_file)
    new_value = shell_env.prepend_path_entry(app_settings.classpath_variable, entry)
    shell_env.save(env_file)

    log_bootstrap(
        f"{symbols.get('success', '✅')} {app_settings.classpath_variable} in {env_file} now starts with {entry}",
        "success",
        logger_to_use,
        app_settings,
    )
    return new_value
