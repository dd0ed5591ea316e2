#!/usr/bin/env python3
#
# Fetch and verify the Unicode data behind the idna_mapping tables.
# IdnaMappingTable.txt is fetched from .../idna/<version>/ and
# DerivedJoiningType.txt from .../<version>/ucd/extracted/. Both are built
# into tables, validated, fingerprinted and installed into idna_mapping/data.
#
# Copyright 2013-2025 The rust-url developers.
#
# Licensed under the Apache License, Version 2.0 <LICENSE-APACHE or
# http://www.apache.org/licenses/LICENSE-2.0> or the MIT license <LICENSE-MIT
# or http://opensource.org/licenses/MIT>, at your option.
#
# Unicode® data: https://www.unicode.org/license.txt

import argparse
import os
import shutil
import sys
import urllib.request
from collections import defaultdict

from idna_mapping import builder
from idna_mapping.codec import NUM_CODEPOINTS
from idna_mapping.errors import TableCorruptionError
from idna_mapping.joining import JOINING_SOURCE
from idna_mapping.mapping import MAPPING_SOURCE

OUTPUT_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "idna_mapping", "data")

SOURCES = {
    MAPPING_SOURCE: "idna/{version}/IdnaMappingTable.txt",
    JOINING_SOURCE: "{version}/ucd/extracted/DerivedJoiningType.txt",
}


def fetch_open(name: str, version: str, local_prefix: str = ""):
    """Fetch Public/<SOURCES[name]> into the local cache and open it."""
    localname = os.path.join(local_prefix, name)
    if not os.path.exists(localname):
        try:
            if not hasattr(fetch_open, "_notice"):
                print("\nDownloading Unicode data files from unicode.org...")
                print("By continuing, you agree to the Unicode License:")
                print("  https://www.unicode.org/license.txt\n")
                fetch_open._notice = True
            url = "https://www.unicode.org/Public/" + SOURCES[name].format(version=version)
            urllib.request.urlretrieve(url, localname)
        except Exception as e:
            sys.stderr.write(f"Error downloading {name}: {e}\n")
            sys.exit(1)

    try:
        return open(localname, encoding="utf-8")
    except OSError as e:
        sys.stderr.write(f"Cannot load {localname}: {e}\n")
        sys.exit(1)


def read_lines(name: str, version: str, local_prefix: str) -> list[str]:
    with fetch_open(name, version, local_prefix) as f:
        return f.read().splitlines()


def count_values(ranges, name_of) -> dict[str, int]:
    counts: dict[str, int] = defaultdict(int)
    covered = 0
    for start, end, value in ranges.ranges():
        counts[name_of(value)] += end - start + 1
        covered += end - start + 1
    counts[name_of(ranges.default)] += NUM_CODEPOINTS - covered
    return counts


def summarize(mapping, joining):
    print(f"Mapping table: {len(mapping)} ranges, {len(mapping.pool)} pooled codepoints")
    for name, n in sorted(count_values(mapping.ranges, lambda e: e.status.name).items()):
        print(f"  {name:<24} {n:>8}")
    print(f"  fingerprint {mapping.fingerprint()}")

    print(f"Joining type table: {len(joining)} ranges")
    for name, n in sorted(count_values(joining.ranges, lambda jt: jt.name).items()):
        print(f"  {name:<24} {n:>8}")
    print(f"  fingerprint {joining.fingerprint()}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Fetch, build and verify the IDNA mapping tables.")
    parser.add_argument("--unicode-version", default=builder.UNICODE_VERSION)
    parser.add_argument("--cache-dir", default="", help="where downloaded files are kept")
    parser.add_argument("--output-dir", default=OUTPUT_DIR)
    parser.add_argument(
        "--check",
        action="store_true",
        help="rebuild from the bundled files without downloading or writing",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    version = args.unicode_version

    if args.check:
        print(f"Checking bundled tables for Unicode {version}...")
        lines = {name: builder.read_data(name) for name in SOURCES}
    else:
        print(f"Fetching Unicode {version} data...")
        if args.cache_dir:
            os.makedirs(args.cache_dir, exist_ok=True)
        lines = {name: read_lines(name, version, args.cache_dir) for name in SOURCES}

    print("Building tables...")
    try:
        mapping, joining = builder.build(lines[MAPPING_SOURCE], lines[JOINING_SOURCE], version)
    except TableCorruptionError as e:
        sys.stderr.write(f"Table build failed: {e}\n")
        sys.exit(1)
    summarize(mapping, joining)

    if not args.check:
        os.makedirs(args.output_dir, exist_ok=True)
        for name in SOURCES:
            shutil.copyfile(os.path.join(args.cache_dir, name), os.path.join(args.output_dir, name))
        print(f"Done. Installed {', '.join(SOURCES)} into {args.output_dir}.")
        if version != builder.UNICODE_VERSION:
            print(f"Update UNICODE_VERSION in idna_mapping/builder.py to {version!r}.")


if __name__ == "__main__":
    main()
