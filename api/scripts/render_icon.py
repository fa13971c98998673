#!/usr/bin/env python3
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from iconmaker.icons.errors import EncodingFailed, QuotaExceeded, RateLimited
from iconmaker.icons.export import export_icon
from iconmaker.icons.generator import default_remote, generate_icon
from iconmaker.icons.models import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND, DEFAULT_SIZE, IconSpec


def main() -> int:
    ap = argparse.ArgumentParser(description="Render an icon and write it as PNG or ICO.")
    ap.add_argument("description", help="What the icon should show, e.g. 'white star'")
    ap.add_argument("--name", default="", help="Base file name (default: icon)")
    ap.add_argument("--background", default=DEFAULT_BACKGROUND, help="#rrggbb background color")
    ap.add_argument("--foreground", default=DEFAULT_FOREGROUND, help="#rrggbb foreground color")
    ap.add_argument("--size", type=int, default=DEFAULT_SIZE, help="Export size in pixels (16..1024)")
    ap.add_argument("--format", choices=["png", "ico"], default="png")
    ap.add_argument("--out-dir", default=".", help="Directory to write into")
    ap.add_argument("--procedural", action="store_true", help="Skip the remote generator even if configured")
    args = ap.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    spec = IconSpec(
        description=args.description,
        background_color=args.background,
        foreground_color=args.foreground,
        size=args.size,
    )
    try:
        result = generate_icon(spec, remote=None if args.procedural else default_remote())
        exported = export_icon(result.raster, size=spec.size, fmt=args.format, name=args.name)
    except (RateLimited, QuotaExceeded, EncodingFailed) as e:
        raise SystemExit(str(e)) from e

    out = Path(args.out_dir) / exported.filename
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(exported.body)
    print(f"Wrote {out} ({result.source}, {len(exported.body)} bytes)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
