#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
import math
import sys

from mjcf_scene import load_mjcf_file


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if len(sys.argv) < 2:
        print("usage: 00_inspect_model.py path/to/model.xml")
        return 1

    result = load_mjcf_file(sys.argv[1])
    for diag in result.diagnostics:
        print(diag)
    if not result.ok:
        return 1

    model = result.model
    print(f"Model {model.name}: {len(model.links)} links, {len(model.joints)} joints")
    for name, node in model.joints.items():
        limit = node.limit
        span = f"[{limit.lower:.3f}, {limit.upper:.3f}]" if limit else "unlimited"
        print(f"  {name:<24} {node.joint_type:<10} axis={node.axis.round(3)} {span}")

    for name, node in model.joints.items():
        target = node.limit.clamp(math.pi / 4) if node.limit else math.pi / 4
        node.set_joint_value(target)
    for name, link in model.links.items():
        print(f"  {name:<24} {link.world_position().round(4)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
