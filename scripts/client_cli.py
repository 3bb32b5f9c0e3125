#!/usr/bin/env python3
"""
Producer CLI - push, query and reclassify data blocks against a running data server.
"""

import argparse
import sys
from pathlib import Path

import dotenv
dotenv.load_dotenv()

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dataserver.client import DataClient
from dataserver.core.integrity import digest
from dataserver.core.schema import BlockType, DataBody, DataEnvelope, DataHeader


def main(argv=None):
    parser = argparse.ArgumentParser(description="Data server producer client")
    parser.add_argument("--server", default=None, help="Server base URL (default: SERVER_URL)")
    sub = parser.add_subparsers(dest="command", required=True)

    push = sub.add_parser("push", help="Push a block; the checksum is computed locally")
    push.add_argument("name")
    push.add_argument("block_type", choices=BlockType.values())
    push.add_argument("payload")

    query = sub.add_parser("query", help="List blocks with a block type")
    query.add_argument("block_type", choices=BlockType.values())

    update = sub.add_parser("update", help="Reclassify a block")
    update.add_argument("name")
    update.add_argument("block_type", choices=BlockType.values())

    args = parser.parse_args(argv)
    client = DataClient(args.server)

    if args.command == "push":
        envelope = DataEnvelope(
            header=DataHeader(name=args.name, block_type=BlockType.parse(args.block_type)),
            body=DataBody(payload=args.payload),
            checksum=digest(args.payload),
        )
        ok = client.push_data(envelope)
        print("accepted" if ok else "rejected")
        return 0 if ok else 1

    if args.command == "query":
        for envelope in client.get_data_by_block_type(args.block_type):
            print(f"{envelope.name}\t{envelope.header.block_type.value}\t{envelope.body.payload}")
        return 0

    ok = client.update_block_type(args.name, args.block_type)
    print("updated" if ok else "not updated")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
