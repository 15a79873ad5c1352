"""CLI tool for running instrumented applications"""

import argparse
import logging
import runpy
import sys

from pinecone_otel import instrument

logger = logging.getLogger(__name__)


def main():
    """Main entry point for the pinecone-instrument CLI tool.

    Parses command-line arguments, initializes Pinecone tracing, and then
    executes the specified Python script with its arguments.
    """
    parser = argparse.ArgumentParser(
        description="Run Python scripts with Pinecone OpenTelemetry instrumentation."
    )
    parser.add_argument("script", help="The Python script to run.")
    parser.add_argument(
        "script_args", nargs=argparse.REMAINDER, help="Arguments to pass to the script."
    )

    args = parser.parse_args()

    try:
        # Reads OTEL_SERVICE_NAME, OTEL_EXPORTER_OTLP_ENDPOINT, ... from the environment
        tracing = instrument(fail_on_error=True)
    except Exception as e:
        logger.error("Failed to initialize instrumentation: %s", e, exc_info=True)
        sys.exit(1)

    try:
        # The target script sees itself as argv[0]
        sys.argv = [args.script] + args.script_args
        runpy.run_path(args.script, run_name="__main__")
    except FileNotFoundError:
        logger.error("Script not found: %s", args.script)
        sys.exit(1)
    except Exception as e:
        logger.error("Error running script %s: %s", args.script, e, exc_info=True)
        sys.exit(1)
    finally:
        if tracing is not None:
            tracing.shutdown()
