"""
NoteBoard — Store Providers
============================

What:  Builds the configured Record Store and Blob Store from settings.
Who:   Called once by main.create_app() unless stores are injected (tests).
"""

import logging

from noteboard.config import Settings, settings as default_settings
from noteboard.services.store_base import BlobStore, RecordStore

logger = logging.getLogger(__name__)


def build_record_store(config: Settings = default_settings) -> RecordStore:
    if config.record_store_backend == "graphql":
        from noteboard.services.graphql_record_store import GraphQLRecordStore

        logger.info("Record store: GraphQL at %s", config.graphql_endpoint or "<unset>")
        return GraphQLRecordStore(
            endpoint=config.graphql_endpoint,
            api_key=config.graphql_api_key,
            timeout=config.request_timeout,
        )

    from noteboard.services.sql_record_store import SQLRecordStore

    logger.info("Record store: SQL")
    return SQLRecordStore(database_url=config.database_url)


def build_blob_store(config: Settings = default_settings) -> BlobStore:
    if config.blob_store_backend == "http":
        from noteboard.services.http_blob_store import HTTPBlobStore

        logger.info("Blob store: HTTP gateway at %s", config.storage_endpoint or "<unset>")
        return HTTPBlobStore(
            endpoint=config.storage_endpoint,
            api_key=config.storage_api_key,
            timeout=config.request_timeout,
        )

    from noteboard.services.blob_service import LocalBlobStore
    from noteboard.services.url_signer import URLSigner

    logger.info("Blob store: local directory %s", config.storage_root)
    return LocalBlobStore(
        storage_root=config.storage_root,
        signer=URLSigner(
            secret=config.url_signing_secret,
            expires_seconds=config.url_expires_seconds,
            base_url=config.public_base_url,
        ),
    )
