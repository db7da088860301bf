"""
NoteBoard — GraphQL Record Store
=================================

What:  Record Store client for the managed platform's GraphQL API.
How:   httpx.AsyncClient POSTs {"query", "variables"} documents matching the
       platform's generated operations for the `Note` model:

           listNotes(limit, nextToken)      → paged; followed until nextToken is null
           createNote(input: CreateNoteInput!)
           deleteNote(input: DeleteNoteInput!)

       Authentication uses the API-key mode (`x-api-key` header).
Who:   Used by NoteBoard when RECORD_STORE_BACKEND=graphql.

Failure mapping:
    transport error / non-2xx / missing data           → TRANSIENT_NETWORK
    GraphQL error typed as validation / bad request    → VALIDATION
    deleteNote on a missing id (null or conditional)   → NOT_FOUND
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from noteboard.config import settings
from noteboard.schemas.note import NoteInput, NoteRecord
from noteboard.services.store_base import Failure, FailureKind, Ok, RecordStore, Result

logger = logging.getLogger(__name__)

NOTE_FIELDS = "id name description image createdAt updatedAt"

LIST_NOTES = f"""
query ListNotes($filter: ModelNoteFilterInput, $limit: Int, $nextToken: String) {{
  listNotes(filter: $filter, limit: $limit, nextToken: $nextToken) {{
    items {{ {NOTE_FIELDS} }}
    nextToken
  }}
}}
"""

CREATE_NOTE = f"""
mutation CreateNote($input: CreateNoteInput!, $condition: ModelNoteConditionInput) {{
  createNote(input: $input, condition: $condition) {{ {NOTE_FIELDS} }}
}}
"""

DELETE_NOTE = f"""
mutation DeleteNote($input: DeleteNoteInput!, $condition: ModelNoteConditionInput) {{
  deleteNote(input: $input, condition: $condition) {{ {NOTE_FIELDS} }}
}}
"""

# errorType values the platform uses for rejected input / missing items
VALIDATION_ERROR_TYPES = ("ValidationError", "BadRequest", "MappingTemplate")
NOT_FOUND_ERROR_TYPES = ("ConditionalCheckFailedException", "NotFound")

PAGE_SIZE = 100


class GraphQLRecordStore(RecordStore):
    def __init__(
        self,
        endpoint: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        key = settings.graphql_api_key if api_key is None else api_key
        if key:
            headers["x-api-key"] = key
        self.endpoint = endpoint or settings.graphql_endpoint
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout or settings.request_timeout,
            transport=transport,
        )

    async def _execute(self, operation: str, query: str, variables: Dict[str, Any]) -> Result[Dict[str, Any]]:
        """POST one GraphQL document and return its `data` object."""
        try:
            response = await self._client.post(
                self.endpoint, json={"query": query, "variables": variables}
            )
        except httpx.HTTPError as e:
            logger.error("%s: request failed: %s", operation, str(e))
            return Failure(
                FailureKind.TRANSIENT_NETWORK,
                "Could not reach the notes service",
                {"operation": operation, "error_type": type(e).__name__},
            )

        if response.is_error:
            logger.error("%s: HTTP %d", operation, response.status_code)
            return Failure(
                FailureKind.TRANSIENT_NETWORK,
                "The notes service returned an error",
                {"operation": operation, "status": response.status_code},
            )

        try:
            body = response.json()
        except ValueError:
            return Failure(
                FailureKind.TRANSIENT_NETWORK,
                "The notes service returned an unreadable response",
                {"operation": operation},
            )

        errors = body.get("errors") or []
        if errors:
            return self._failure_from_errors(operation, errors, variables)

        data = body.get("data")
        if not isinstance(data, dict):
            return Failure(
                FailureKind.TRANSIENT_NETWORK,
                "The notes service returned no data",
                {"operation": operation},
            )
        return Ok(data)

    def _failure_from_errors(
        self, operation: str, errors: List[Dict[str, Any]], variables: Dict[str, Any]
    ) -> Failure:
        first = errors[0]
        error_type = str(first.get("errorType") or "")
        message = str(first.get("message") or "GraphQL error")
        logger.warning("%s: GraphQL error %s: %s", operation, error_type or "-", message)

        if any(marker in error_type for marker in NOT_FOUND_ERROR_TYPES):
            note_id = variables.get("input", {}).get("id")
            return Failure(FailureKind.NOT_FOUND, message, {"resource": "note", "resource_id": note_id})
        if any(marker in error_type for marker in VALIDATION_ERROR_TYPES):
            return Failure(FailureKind.VALIDATION, message, {"operation": operation})
        return Failure(
            FailureKind.TRANSIENT_NETWORK,
            message,
            {"operation": operation, "error_type": error_type},
        )

    async def list(self) -> Result[List[NoteRecord]]:
        records: List[NoteRecord] = []
        next_token: Optional[str] = None
        while True:
            result = await self._execute(
                "listNotes", LIST_NOTES, {"limit": PAGE_SIZE, "nextToken": next_token}
            )
            if isinstance(result, Failure):
                return result
            page = result.value.get("listNotes") or {}
            records.extend(NoteRecord.from_wire(item) for item in page.get("items") or [] if item)
            next_token = page.get("nextToken")
            if not next_token:
                return Ok(records)

    async def create(self, note: NoteInput) -> Result[NoteRecord]:
        if not note.name or not note.description:
            return Failure(
                FailureKind.VALIDATION,
                "Both name and description are required",
                {"field": "name" if not note.name else "description"},
            )
        result = await self._execute("createNote", CREATE_NOTE, {"input": note.to_wire()})
        if isinstance(result, Failure):
            return result
        item = result.value.get("createNote")
        if not item:
            return Failure(FailureKind.TRANSIENT_NETWORK, "The notes service did not return the new note")
        return Ok(NoteRecord.from_wire(item))

    async def delete(self, note_id: str) -> Result[NoteRecord]:
        result = await self._execute("deleteNote", DELETE_NOTE, {"input": {"id": note_id}})
        if isinstance(result, Failure):
            return result
        item = result.value.get("deleteNote")
        if not item:
            return Failure(
                FailureKind.NOT_FOUND,
                f"note with ID '{note_id}' was not found",
                {"resource": "note", "resource_id": note_id},
            )
        return Ok(NoteRecord.from_wire(item))

    async def health_check(self) -> bool:
        result = await self._execute("typename", "query { __typename }", {})
        return isinstance(result, Ok)

    async def close(self) -> None:
        await self._client.aclose()
