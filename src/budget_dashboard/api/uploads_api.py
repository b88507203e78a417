"""
Statement upload API client for the budget service.
"""

import logging
import os
from typing import BinaryIO

from ..models.upload import AccountFormat, UploadResult
from .base_client import ensure_success, parse_payload

logger = logging.getLogger(__name__)


class UploadsAPI:
    """
    API client for the statement import endpoint.
    """

    def __init__(self, client):
        """
        Initialize the UploadsAPI client.

        Args:
            client: The base client to use for API requests
        """
        self.client = client

    def upload_statement(self, file: BinaryIO, account_format: AccountFormat) -> UploadResult:
        """
        Submit a bank statement for server-side parsing.

        Args:
            file: Open binary file with the statement CSV
            account_format: Bank format of the statement

        Returns:
            UploadResult: Counts of parsed and newly added transactions
        """
        filename = os.path.basename(getattr(file, 'name', None) or 'statement.csv')
        response = self.client.post_multipart(
            'upload-csv',
            files={'file': (filename, file, 'text/csv')},
            form={'account_type': AccountFormat(account_format).value}
        )
        ensure_success(response, 'Upload')
        result = parse_payload(UploadResult.from_api_response, response, 'upload')
        logger.info(f"Uploaded {filename}: {result.describe()}")
        return result
