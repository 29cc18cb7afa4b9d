"""Load test suites from YAML files."""

import asyncio
import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from jettest.models.definition import TestSuite

log = logging.getLogger(__name__)


async def load_test_suite(path: Path) -> TestSuite:
    """Load and validate a test suite file.

    Args:
        path: Path to the YAML suite file

    Returns:
        Parsed test suite

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, is not valid YAML or does not match
            the suite schema

    """
    if not path.is_file():
        raise FileNotFoundError(f"Test file not found: {path}")

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if data is None:
        raise ValueError(f"Empty test file: {path}")

    try:
        suite = TestSuite.model_validate(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid test suite schema in {path}: {exc}") from exc

    log.info("Loaded %d test(s) from %s", len(suite.tests), path)
    return suite
