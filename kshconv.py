#!/usr/bin/env python
import argparse
import json
import logging
import pathlib
import sys

from ksh2kson import ConversionError, KSHParser, convert_chart

FORMATS = ["ksh", "kson"]


def guess_format(path: pathlib.Path) -> str:
    suffix = path.suffix.lower().lstrip(".")
    if suffix not in FORMATS:
        raise OSError(f"cannot guess format from file extension (got {path.suffix!r})")
    return suffix


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Converts a KSH chart into a KSON document.")
    parser.add_argument("filename", help="input KSH file to read")
    parser.add_argument(
        "-f", "--from", dest="from_format", choices=FORMATS, help="input file format (default: guess from filename)"
    )
    parser.add_argument(
        "-t", "--to", dest="to_format", choices=FORMATS, help="output file format (default: opposite of the input)"
    )
    parser.add_argument("-o", "--out", help="output file name (default: input file name with the new extension)")
    parser.add_argument("--lenient", action="store_true", help="skip unrecognized chart lines instead of failing")
    parser.add_argument("--indent", type=int, default=None, help="indentation of the JSON output")
    parser.add_argument("--log-level", action="store", help="change logging level. invalid values are silently ignored")
    args = parser.parse_args(argv)

    log_level = logging.WARNING
    if args.log_level is not None:
        try:
            log_level_int = int(args.log_level)
            if log_level_int in logging._levelToName:
                log_level = log_level_int
        except ValueError:
            log_level_str = args.log_level.upper()
            log_level = logging._nameToLevel.get(log_level_str, log_level)
    logging.basicConfig(format="[%(levelname)s %(asctime)s] %(filename)s: %(message)s", level=log_level)

    in_path = pathlib.Path(args.filename)
    try:
        from_format = args.from_format or guess_format(in_path)
        to_format = args.to_format or ("kson" if from_format == "ksh" else "ksh")
        if from_format == to_format:
            raise ValueError(f"input and output formats are both {from_format}")
        if from_format == "kson":
            raise NotImplementedError("converting KSON to KSH is not supported yet")
        out_path = pathlib.Path(args.out) if args.out else in_path.with_suffix(f".{to_format}")

        with in_path.open("r", encoding="utf-8-sig") as f:
            document = convert_chart(KSHParser(strict=not args.lenient).parse(f))
        output = json.dumps(document.to_dict(), ensure_ascii=False, indent=args.indent)

        with out_path.open("w", encoding="utf-8") as f:
            f.write(output)
    except (ConversionError, NotImplementedError, OSError, ValueError) as err:
        print(f"{parser.prog}: {type(err).__name__}: {err}", file=sys.stderr)
        print(f"{parser.prog}: error: unable to convert file: {args.filename!r}", file=sys.stderr)
        return 3

    return 0


if __name__ == "__main__":
    sys.exit(main())
