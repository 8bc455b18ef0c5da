"""Generate the VAPID key pair the backend needs to send web push."""

import json
import sys
from pathlib import Path

from cryptography.hazmat.primitives import serialization
from py_vapid import Vapid
from py_vapid.utils import b64urlencode

from storysky.config import get_settings


def generate_keys() -> dict[str, str]:
    vapid = Vapid()
    vapid.generate_keys()
    public_bytes = vapid.public_key.public_bytes(
        serialization.Encoding.X962,
        serialization.PublicFormat.UncompressedPoint,
    )
    private_bytes = vapid.private_key.private_numbers().private_value.to_bytes(32, "big")
    return {
        "publicKey": b64urlencode(public_bytes),
        "privateKey": b64urlencode(private_bytes),
    }


def main() -> None:
    path = Path(sys.argv[1] if len(sys.argv) > 1 else get_settings().vapid_file)
    if path.exists():
        print(f"{path} already exists, not overwriting.")
        return
    path.write_text(json.dumps(generate_keys(), indent=2), encoding="utf-8")
    print(f"VAPID keys written to {path}")


main()
