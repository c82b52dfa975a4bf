"""
Create Sequence Script
======================
Builds a Klaviyo flow from a JSON file, without running the API server.

The file has the same shape as the POST /api/v1/flows/sequences body:
    {
        "flowName": "Welcome Series",
        "emailSteps": [
            {"subject": "Hi", "content": "<p>Hi</p>", "delayDays": 0},
            {"subject": "Next", "content": "<p>Next</p>", "delayDays": 2}
        ]
    }

The API key comes from --api-key, the file's "apiKey", or KLAVIYO_API_KEY.

Usage:
    python scripts/create_sequence.py sequence.json
    python scripts/create_sequence.py sequence.json --api-key pk_xxx

Exit codes: 0 = all steps created, 1 = error, 2 = flow created with failed steps
"""

import asyncio
import json
import os
import sys

sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv
from pydantic import ValidationError as SchemaError

from app.shared.core.constants import EXIT_ERROR, EXIT_OK, EXIT_PARTIAL_FAILURE
from app.shared.core.logging import setup_logging
from app.shared.utils.exceptions import FlowBuilderError
from app.modules.flow_builder.schemas.flow_schemas import CreateSequenceRequest
from app.modules.flow_builder.services.flow_assembly_service import (
    flow_assembly_service,
    to_response_payload,
)

# Load environment variables
load_dotenv()


def load_request(path: str, api_key: str = None) -> CreateSequenceRequest:
    """Read the sequence file and fill in the API key."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    request = CreateSequenceRequest.model_validate(data)
    key = api_key or request.api_key or os.getenv("KLAVIYO_API_KEY")
    return request.model_copy(update={"api_key": key})


async def run(path: str, api_key: str = None) -> int:
    try:
        request = load_request(path, api_key)
    except (OSError, json.JSONDecodeError, SchemaError) as e:
        print(f"❌ Could not read {path}: {e}")
        return EXIT_ERROR

    print(f"⏳ Creating flow '{request.flow_name}' with {len(request.email_steps or [])} email(s)...")

    try:
        result = await flow_assembly_service.assemble(request)
    except FlowBuilderError as e:
        print(f"\n❌ Failed ({e.status_code}): {e.message}")
        return EXIT_ERROR

    print(json.dumps(to_response_payload(result, request.list_id), indent=2))

    if result.is_partial:
        print(f"\n⚠️ {result.message}, but {len(result.failures)} call(s) failed:")
        for failure in result.failures:
            print(f"   - email {failure.step + 1} ({failure.stage.value}): {failure.status} {failure.error}")
        return EXIT_PARTIAL_FAILURE

    print(f"\n✅ {result.message}")
    return EXIT_OK


USAGE = "Usage: python scripts/create_sequence.py <sequence.json> [--api-key KEY]"


def parse_args(args):
    """
    Return (path, api_key) from the command line, or None if it is malformed.
    --api-key may come before or after the path and must carry a value.
    """
    path = None
    api_key = None
    remaining = list(args)
    while remaining:
        arg = remaining.pop(0)
        if arg == "--api-key":
            if api_key is not None or not remaining or remaining[0].startswith("-"):
                return None
            api_key = remaining.pop(0)
        elif arg.startswith("-") or path is not None:
            return None
        else:
            path = arg

    if path is None:
        return None
    return path, api_key


def main():
    parsed = parse_args(sys.argv[1:])
    if parsed is None:
        print(USAGE)
        return EXIT_ERROR

    path, api_key = parsed
    setup_logging()
    return asyncio.run(run(path, api_key))


if __name__ == "__main__":
    sys.exit(main())
