#!/usr/bin/env python3
"""Script to export the Swagger document of a model directory."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

import structlog

from sigserve.common.config import get_config
from sigserve.common.logging import configure_logging
from sigserve.runtime.base import read_signatures
from sigserve.runtime.errors import RuntimeErrorBase
from sigserve.runtime.loader import FRAMEWORK_LOADERS, detect_framework, load_runtime
from sigserve.swagger.document import assemble
from sigserve.swagger.errors import SwaggerError

logger = structlog.get_logger("export_swagger")


async def export_swagger(
    model_path: str,
    framework: Optional[str] = None,
    default_signature: Optional[str] = None,
    indent: Optional[int] = 2,
) -> str:
    """Load the model at ``model_path`` and return its Swagger document as JSON."""
    framework = framework or detect_framework(model_path)
    runtime = await asyncio.to_thread(load_runtime, model_path, framework)
    try:
        document = assemble(
            read_signatures(runtime),
            default_signature=default_signature or runtime.default_signature_name,
        )
    finally:
        runtime.close()

    logger.info(
        "Swagger document synthesized",
        model_path=model_path,
        framework=framework,
        signatures=document.signature_names,
    )
    return document.to_json(indent=indent)


def main():
    """Main function for CLI."""
    parser = argparse.ArgumentParser(description="Export the Swagger document of a model directory")
    parser.add_argument("model_path", help="Model directory (SavedModel or joblib + signatures.json)")
    parser.add_argument("--framework", choices=sorted(FRAMEWORK_LOADERS), help="Skip framework detection")
    parser.add_argument("--default-signature", help="Signature listed first in the document")
    parser.add_argument("--output", "-o", help="Write to this file instead of stdout")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation")

    args = parser.parse_args()

    config = get_config("export_swagger")
    # stdout carries the document
    configure_logging("export_swagger", config.ml_log_level, config.ml_log_format, stream=sys.stderr)

    try:
        content = asyncio.run(export_swagger(
            args.model_path,
            framework=args.framework,
            default_signature=args.default_signature,
            indent=args.indent,
        ))
    except (SwaggerError, RuntimeErrorBase) as e:
        logger.error("Swagger export failed", model_path=args.model_path, error=str(e))
        print(f"Failed to export swagger document: {e}", file=sys.stderr)
        sys.exit(1)

    if args.output:
        Path(args.output).write_text(content + "\n")
        print(f"Swagger document written to {args.output}")
    else:
        print(content)


if __name__ == "__main__":
    main()
