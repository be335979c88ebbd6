"""A small command-line parser with positionals, valued options and flags."""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

_INT_PREFIX = re.compile(r"[ \t\n\v\f\r]*[+-]?\d+")
_FLOAT_PREFIX = re.compile(
    r"[ \t\n\v\f\r]*[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|infinity|inf|nan)",
    re.IGNORECASE,
)


class ArgumentError(ValueError):
    """The command line does not match the declared arguments."""


@dataclass
class _Positional:
    name: str
    help: str
    required: bool
    value: str = ""


@dataclass
class _Option:
    short_flag: str
    long_flag: str
    help: str
    default: str
    has_value: bool
    is_flag: bool
    value: str
    was_set: bool = False


def _normalize(flag: str) -> str:
    return flag.lstrip("-")


class ArgumentParser:
    """Declares arguments, parses a command line and answers queries about it."""

    def __init__(self, program_name: str, description: str = "") -> None:
        self.program_name = program_name
        self.description = description
        self._positionals: list[_Positional] = []
        self._options: dict[str, _Option] = {}
        self._flag_map: dict[str, str] = {}

    def add_positional(self, name: str, help: str = "", required: bool = True) -> None:
        self._positionals.append(_Positional(name, help, required))

    def add_option(
        self,
        short_flag: str,
        long_flag: str,
        help: str = "",
        default: str = "",
        has_value: bool = True,
    ) -> None:
        self._register(
            _Option(short_flag, long_flag, help, default, has_value, False, default)
        )

    def add_flag(self, short_flag: str, long_flag: str, help: str = "") -> None:
        self._register(_Option(short_flag, long_flag, help, "false", False, True, "false"))

    def _register(self, option: _Option) -> None:
        key = _normalize(option.long_flag or option.short_flag)
        self._options[key] = option
        if option.short_flag:
            self._flag_map[_normalize(option.short_flag)] = key
        if option.long_flag:
            self._flag_map[_normalize(option.long_flag)] = key

    def parse(self, argv: Optional[Sequence[str]] = None) -> None:
        """Parse arguments (without the program name); raises ArgumentError."""
        args = list(sys.argv[1:] if argv is None else argv)
        positional_iter = iter(self._positionals)
        i = 0
        while i < len(args):
            arg = args[i]
            i += 1
            if not arg:
                continue
            if arg.startswith("-"):
                name, eq, value = _normalize(arg).partition("=")
                if not eq:
                    value = ""
                key = self._flag_map.get(name)
                if key is None:
                    raise ArgumentError(f"Unknown option: {arg}")
                option = self._options[key]
                if option.is_flag:
                    option.value = "true"
                    option.was_set = True
                elif option.has_value:
                    if value:
                        option.value = value
                    elif i < len(args) and not args[i].startswith("-"):
                        option.value = args[i]
                        i += 1
                    else:
                        raise ArgumentError(f"Option {arg} requires a value")
                    option.was_set = True
            else:
                positional = next(positional_iter, None)
                if positional is None:
                    raise ArgumentError(f"Unexpected argument: {arg}")
                positional.value = arg

        for positional in self._positionals:
            if positional.required and not positional.value:
                raise ArgumentError(f"Missing required argument: {positional.name}")

    def _find(self, name: str) -> Optional[_Option]:
        key = _normalize(name)
        option = self._options.get(key)
        if option is not None:
            return option
        mapped = self._flag_map.get(key)
        return self._options.get(mapped) if mapped is not None else None

    def positional(self, name: str) -> str:
        """Value of a positional argument, or an empty string."""
        for positional in self._positionals:
            if positional.name == name:
                return positional.value
        return ""

    def option(self, name: str) -> str:
        """Current value of an option (its default if unset), or an empty string."""
        option = self._find(name)
        return option.value if option is not None else ""

    def has_flag(self, name: str) -> bool:
        return self.option(name) == "true"

    def has_option(self, name: str) -> bool:
        """True when the option was given on the command line."""
        key = _normalize(name)
        mapped = self._flag_map.get(key)
        if mapped is not None and mapped in self._options:
            return self._options[mapped].was_set
        option = self._options.get(key)
        return option.was_set if option is not None else False

    def get_int(self, name: str) -> Optional[int]:
        """Leading integer of the option's value, or None."""
        match = _INT_PREFIX.match(self.option(name))
        if match is None:
            return None
        value = int(match.group())
        if not -(2**31) <= value < 2**31:
            return None
        return value

    def get_float(self, name: str) -> Optional[float]:
        """Leading number of the option's value, or None."""
        match = _FLOAT_PREFIX.match(self.option(name))
        return float(match.group()) if match is not None else None

    def format_help(self) -> str:
        lines = [self.description, ""]
        usage = f"Usage: {self.program_name}"
        if self._options:
            usage += " [OPTIONS]"
        for positional in self._positionals:
            usage += f" <{positional.name}>" if positional.required else f" [{positional.name}]"
        lines += [usage, ""]

        if self._positionals:
            lines.append("Arguments:")
            lines += [f"  {p.name:<20}{p.help}" for p in self._positionals]
            lines.append("")

        if self._options:
            lines.append("Options:")
            seen: set[tuple[str, str]] = set()
            for key in sorted(self._options):
                option = self._options[key]
                identity = (option.long_flag, option.short_flag)
                if identity in seen:
                    continue
                seen.add(identity)
                flags = f"-{option.short_flag}" if option.short_flag else ""
                if option.long_flag:
                    if flags:
                        flags += ", "
                    flags += f"--{option.long_flag}"
                if option.has_value and not option.is_flag:
                    flags += " <value>"
                line = f"  {flags:<30}{option.help}"
                if option.default and not option.is_flag:
                    line += f" (default: {option.default})"
                lines.append(line)
        return "\n".join(lines) + "\n"

    def print_help(self) -> None:
        sys.stdout.write(self.format_help())

    def print_version(self, version: str) -> None:
        sys.stdout.write(f"{self.program_name} version {version}\n")