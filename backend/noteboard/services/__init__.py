# Services package init
"""
NoteBoard — Services Layer
===========================

Service Inventory:
    - store_base:            Result types and the RecordStore / BlobStore contracts
    - board_state:           Pure (state, event) → (state', effects) transitions
    - note_board:            NoteBoard, runs effects against the two stores
    - board_registry:        One NoteBoard per browser session
    - graphql_record_store:  Record Store on the managed GraphQL API
    - sql_record_store:      Record Store on async SQLAlchemy
    - blob_service:          Blob Store on the local disk, signed URLs
    - http_blob_store:       Blob Store on the managed storage gateway
    - url_signer:            HMAC-signed download URLs
    - providers:             Builds the configured stores

Routes never talk to a store directly; they call a NoteBoard operation.
"""
