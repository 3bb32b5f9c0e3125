"""
Producer-side HTTP client for the data server.
Transport errors are logged rather than raised; callers get False or [] back.
"""

from typing import List
from urllib.parse import quote

import requests

from util.logging import logger

from .core import config
from .core.schema import BlockType, DataBody, DataEnvelope, DataHeader

URI_PUSHDATA = "{base}/dataserver/pushdata"
URI_GETDATA = "{base}/dataserver/data/{block_type}"
URI_PATCHDATA = "{base}/dataserver/update/{name}/{new_block_type}"


def _envelope_from_dict(data: dict) -> DataEnvelope:
    header = data["header"]
    return DataEnvelope(
        header=DataHeader(name=header["name"], block_type=BlockType.parse(header["blockType"])),
        body=DataBody(payload=data["body"]["payload"]),
        checksum=data.get("checksum") or "",
    )


class DataClient:

    def __init__(self, base_url: str = None, timeout: float = 10.0, session: requests.Session = None):
        self.base_url = (base_url or config.SERVER_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def push_data(self, envelope: DataEnvelope) -> bool:
        url = URI_PUSHDATA.format(base=self.base_url)
        logger.info(f"Pushing data {envelope.name} to {url}")

        try:
            response = self.session.post(url, json=envelope.to_dict(), timeout=self.timeout)
            if not response.ok:
                logger.error(f"Failed to push data. Server returned status code: {response.status_code}")
                return False
            accepted = response.json() is True
        except ValueError as e:
            logger.error(f"Malformed response while pushing data: {e}")
            return False
        except requests.RequestException as e:
            logger.error(f"Error while pushing data to the server: {e}")
            return False

        logger.info(f"Push complete. Server response: {accepted}")
        return accepted

    def get_data_by_block_type(self, block_type) -> List[DataEnvelope]:
        tag = BlockType.parse(block_type)
        url = URI_GETDATA.format(base=self.base_url, block_type=tag.value)
        logger.info(f"Querying for data with header block type {tag.value}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            if not response.ok:
                logger.error(f"Failed to fetch data. Server returned status code: {response.status_code}")
                return []
            envelopes = [_envelope_from_dict(item) for item in response.json()]
        except (ValueError, KeyError, TypeError) as e:
            # undecodable body or a malformed envelope
            logger.error(f"Malformed response while querying the server: {e}")
            return []
        except requests.RequestException as e:
            logger.error(f"Error while querying the server: {e}")
            return []

        logger.info(f"Query successful. Found {len(envelopes)} data envelopes with block type {tag.value}")
        return envelopes

    def update_block_type(self, name: str, new_block_type) -> bool:
        tag = BlockType.parse(new_block_type)
        url = URI_PATCHDATA.format(base=self.base_url, name=quote(name, safe=""), new_block_type=tag.value)
        logger.info(f"Updating block type to {tag.value} for block with name {name}")

        try:
            response = self.session.patch(url, timeout=self.timeout)
            if not response.ok:
                logger.error(f"Failed to update block type. Server returned status code: {response.status_code}")
                return False
            return response.json() is True
        except ValueError as e:
            logger.error(f"Malformed response while updating block type: {e}")
            return False
        except requests.RequestException as e:
            logger.error(f"Error while updating block type: {e}")
            return False
