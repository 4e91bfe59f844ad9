"""HTTP implementations of the gateway contracts (PostgREST-compatible).

Every request carries the project API key plus the caller's bearer token
and is bounded by the connect/read timeouts from settings, so a hung
backend surfaces as a TransportError instead of hanging an action forever.
"""

from typing import Any, Self

import httpx

from src.taskboard.core.config import Settings, get_settings
from src.taskboard.core.exceptions import (
    NotFoundError,
    TaskboardError,
    TransportError,
    error_for_status,
    extract_error_detail,
)
from src.taskboard.core.logging import get_logger
from src.taskboard.gateway.protocols import AuthSession, Row, Table

logger = get_logger(__name__)

_SINGLE_OBJECT = "application/vnd.pgrst.object+json"


def build_timeout(settings: Settings) -> httpx.Timeout:
    return httpx.Timeout(
        settings.gateway_read_timeout_seconds,
        connect=settings.gateway_connect_timeout_seconds,
    )


def _error_from_response(response: httpx.Response) -> TaskboardError:
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text
    return error_for_status(response.status_code, extract_error_detail(body))


class PostgrestGateway:
    """RemoteDataGateway over a PostgREST endpoint (``{gateway_url}/rest/v1``)."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self._client = client or httpx.AsyncClient(
            base_url=f"{self.settings.gateway_url}/rest/v1",
            timeout=build_timeout(self.settings),
        )
        self._session: AuthSession | None = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def bind_session(self, session: AuthSession | None) -> None:
        self._session = session

    def current_session(self) -> AuthSession | None:
        return self._session

    def _headers(self, **extra: str) -> dict[str, str]:
        token = self._session.access_token if self._session else self.settings.gateway_api_key
        return {
            "apikey": self.settings.gateway_api_key,
            "Authorization": f"Bearer {token}",
            **extra,
        }

    async def _request(
        self,
        method: str,
        table: Table,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = await self._client.request(
                method,
                f"/{table.value}",
                params=params,
                json=json,
                headers=self._headers(**(headers or {})),
            )
        except httpx.TimeoutException as e:
            logger.warning("Gateway request timed out", method=method, table=table.value)
            raise TransportError(f"Gateway timed out on {method} {table.value}") from e
        except httpx.HTTPError as e:
            logger.warning(
                "Gateway unreachable", method=method, table=table.value, error=str(e)
            )
            raise TransportError(f"Gateway unreachable: {e}") from e

        if response.is_error:
            error = _error_from_response(response)
            logger.info(
                "Gateway request failed",
                method=method,
                table=table.value,
                status_code=response.status_code,
                error_kind=error.kind,
            )
            raise error

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def select_all(
        self, table: Table, *, order_by: str | None = None, descending: bool = False
    ) -> list[Row]:
        params = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        rows = await self._request("GET", table, params=params)
        return list(rows or [])

    async def select_by_id(self, table: Table, id: str) -> Row:
        row = await self._request(
            "GET",
            table,
            params={"select": "*", "id": f"eq.{id}"},
            headers={"Accept": _SINGLE_OBJECT},
        )
        if not row:
            raise NotFoundError(f"{table.value} {id} not found")
        return row

    async def insert(self, table: Table, values: Row) -> Row:
        rows = await self._request(
            "POST",
            table,
            params={"select": "*"},
            json=values,
            headers={"Prefer": "return=representation"},
        )
        if not rows:
            raise TransportError(f"Insert into {table.value} returned no row")
        return rows[0] if isinstance(rows, list) else rows

    async def update(self, table: Table, id: str, values: Row) -> Row | None:
        rows = await self._request(
            "PATCH",
            table,
            params={"select": "*", "id": f"eq.{id}"},
            json=values,
            headers={"Prefer": "return=representation"},
        )
        if rows == []:
            # RLS hides rows the caller may not touch: nothing matched
            raise NotFoundError(f"{table.value} {id} not found")
        if isinstance(rows, list):
            return rows[0]
        return rows

    async def delete(self, table: Table, id: str) -> None:
        rows = await self._request(
            "DELETE",
            table,
            params={"id": f"eq.{id}"},
            headers={"Prefer": "return=representation"},
        )
        if rows == []:
            raise NotFoundError(f"{table.value} {id} not found")


class FunctionUserProvisioner:
    """Client for the privileged ``create-user`` function.

    Status contract: 201 created, 400 invalid fields, 401 bad token,
    403 insufficient permission, 409 email already registered.
    """

    function_name = "create-user"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.settings = settings or get_settings()
        self._client = client or httpx.AsyncClient(
            base_url=self.settings.functions_url or "",
            timeout=build_timeout(self.settings),
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def provision(self, access_token: str, body: Row) -> str:
        try:
            response = await self._client.post(
                f"/{self.function_name}",
                json=body,
                headers={
                    "apikey": self.settings.gateway_api_key,
                    "Authorization": f"Bearer {access_token}",
                },
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Provisioning function unreachable: {e}") from e

        if response.status_code == 409:
            raise error_for_status(409, "Email already registered")
        if response.is_error:
            raise _error_from_response(response)

        payload = response.json()
        user = payload.get("user", payload) if isinstance(payload, dict) else None
        user_id = user.get("id") if isinstance(user, dict) else None
        if not user_id:
            raise TransportError("Provisioning function returned no user id")
        return str(user_id)
