from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Callable, Dict, Optional, Tuple

from . import codec
from .ini_format import IniFileError, render_ini
from .ini_store import InvalidNameError, check_names
from .lib.env import PATHS
from .support import Session, installer_session


Codec = Tuple[Callable[[Any], str], Callable[[str], Any]]

VALUE_TYPES: Dict[str, Codec] = {
    "string": (str, str),
    "bool": (codec.encode_bool, codec.decode_bool),
    "int": (codec.encode_int, codec.decode_int),
    "float": (codec.encode_float, codec.decode_float),
    "bytes": (codec.encode_bytes, codec.decode_bytes),
    "timestamp": (codec.encode_timestamp, codec.decode_timestamp),
}


def _typed(type_name: str, text: str) -> Any:
    _, decode = VALUE_TYPES[type_name]
    return decode(text)


def _validate(args: argparse.Namespace) -> None:
    """Decode user-supplied values up front so bad input never reaches the store."""
    if args.subcmd in {"get", "set"}:
        check_names(args.section, args.key)
    if args.subcmd == "get":
        text = args.default
        if text is None:
            if args.type != "string":
                raise codec.ValueFormatError(f"--default is required with --type {args.type}")
            text = ""
        args.typed_default = _typed(args.type, text)
    elif args.subcmd == "set":
        args.typed_value = _typed(args.type, args.value)


def cmd_get(session: Session, args: argparse.Namespace) -> int:
    getter = getattr(session.store, f"get_{args.type}")
    value = getter(args.section, args.key, args.typed_default)
    encode, _ = VALUE_TYPES[args.type]
    print(encode(value))
    return 0


def cmd_set(session: Session, args: argparse.Namespace) -> int:
    setter = getattr(session.store, f"set_{args.type}")
    setter(args.section, args.key, args.typed_value)
    return 0


def _dump_yaml(sections: Dict[str, Dict[str, str]]) -> str:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError(
            "YAML output requested but PyYAML is not available. "
            "Use --format ini|json or install PyYAML."
        ) from e
    return yaml.safe_dump(sections, sort_keys=False)


def cmd_show(session: Session, args: argparse.Namespace) -> int:
    sections = session.store.snapshot()
    if args.format == "json":
        out = json.dumps(sections, indent=2) + "\n"
    elif args.format == "yaml":
        out = _dump_yaml(sections)
    else:
        out = render_ini(sections)
    sys.stdout.write(out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="installcmx")
    p.add_argument("--ini", default=PATHS.ini_default, help="Path to the installer settings file")
    p.add_argument("--log", default=PATHS.log_default, help="Path to the installer log")
    p.add_argument("--lazy", action="store_true", help="Defer reading the settings file until first use")

    sub = p.add_subparsers(dest="subcmd", required=True)
    types = sorted(VALUE_TYPES)

    sp = sub.add_parser("get", help="Print a setting, creating it with the default if missing")
    sp.add_argument("section")
    sp.add_argument("key")
    sp.add_argument("--default", default=None)
    sp.add_argument("--type", choices=types, default="string")
    sp.set_defaults(func=cmd_get)

    sp = sub.add_parser("set", help="Store a setting")
    sp.add_argument("section")
    sp.add_argument("key")
    sp.add_argument("value")
    sp.add_argument("--type", choices=types, default="string")
    sp.set_defaults(func=cmd_set)

    sp = sub.add_parser("show", help="Print all settings")
    sp.add_argument("--format", choices=["ini", "json", "yaml"], default="ini")
    sp.set_defaults(func=cmd_show)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    try:
        _validate(args)
    except (codec.ValueFormatError, InvalidNameError) as e:
        p.error(str(e))

    try:
        with installer_session(args.ini, args.log, lazy=bool(args.lazy)) as session:
            return int(args.func(session, args))
    except IniFileError as e:
        sys.stderr.write(f"installcmx: {e}\n")
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
