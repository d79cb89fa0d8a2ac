"""Route handlers mapping HTTP requests onto repository operations.

Fixed paths are declared before ``/{type_name}/...`` so they are not
swallowed by the content routes; FastAPI matches in declaration order.
"""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Query, Request, Response

from mockcms.content.store import is_valid_id
from mockcms.errors import InvalidRequestError
from mockcms.repository import Repository

router = APIRouter()

JsonBody = Annotated[dict[str, Any], Body()]
OptionalJsonBody = Annotated[dict[str, Any] | None, Body()]


def get_repository(request: Request) -> Repository:
    return request.app.state.repository


RepositoryDep = Annotated[Repository, Depends(get_repository)]


def _dump(model: Any) -> Any:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── Types ────────────────────────────────────────────────────────


@router.get("/types")
def list_types(repository: RepositoryDep):
    return [t.summary() for t in repository.list_types()]


# ── Search ───────────────────────────────────────────────────────


@router.post("/search")
def search_all(repository: RepositoryDep, query: OptionalJsonBody = None):
    return _dump(repository.search(query))


# ── Slugs ────────────────────────────────────────────────────────


@router.post("/slug")
def request_slug(body: JsonBody, repository: RepositoryDep):
    return repository.request_slug(body).to_wire()


@router.get("/slugs")
def search_slugs(
    repository: RepositoryDep,
    channel: str | None = None,
    path: str | None = None,
    value_type: Annotated[str | None, Query(alias="valueType")] = None,
    value: str | None = None,
):
    slugs = repository.search_slugs(channel=channel, path=path, value_type=value_type, value=value)
    return {"slugs": [s.to_wire() for s in slugs]}


@router.post("/slugs/byValues")
def slugs_by_values(body: JsonBody, repository: RepositoryDep):
    mapping = repository.slugs_by_values(body.get("values"))
    return {value: [s.to_wire() for s in slugs] for value, slugs in mapping.items()}


@router.get("/slug/byValue/{value}")
def slugs_by_value(value: str, repository: RepositoryDep):
    if not is_valid_id(value):
        raise InvalidRequestError(f"{value!r} is not a valid id")
    return {"slugs": [s.to_wire() for s in repository.slugs_by_value(value)]}


@router.get("/slug/{slug_id}")
def get_slug(slug_id: str, repository: RepositoryDep):
    return repository.get_slug(slug_id).to_wire()


@router.delete("/slug/{slug_id}")
def delete_slug(slug_id: str, repository: RepositoryDep):
    repository.delete_slug(slug_id)


# ── User settings ────────────────────────────────────────────────


@router.get("/user-setting/{user_id}/{type_name}/{key}")
def get_user_setting(user_id: str, type_name: str, key: str, repository: RepositoryDep):
    return repository.get_user_setting(user_id, type_name, key)


@router.put("/user-setting/{user_id}/{type_name}/{key}")
def put_user_setting(
    user_id: str,
    type_name: str,
    key: str,
    value: Annotated[Any, Body()],
    repository: RepositoryDep,
):
    return repository.put_user_setting(user_id, type_name, key, value)


@router.delete("/user-setting/{user_id}/{type_name}/{key}")
def delete_user_setting(user_id: str, type_name: str, key: str, repository: RepositoryDep):
    repository.delete_user_setting(user_id, type_name, key)


# ── Listing ──────────────────────────────────────────────────────


def _list_page(
    request: Request,
    repository: Repository,
    type_name: str | None,
    types: list[str] | None,
) -> dict[str, Any]:
    filters: dict[str, Any] = {
        key: value
        for key, value in request.query_params.items()
        if key != "type"
    }
    if types:
        filters["type"] = types
    page = repository.list(type_name, filters)
    body: dict[str, Any] = {"items": [_dump(item) for item in page.items]}
    if page.next_cursor is not None:
        url = request.url.include_query_params(cursor=page.next_cursor)
        body["next"] = f"{url.path}?{url.query}"
    return body


@router.get("/all")
def list_all(
    request: Request,
    repository: RepositoryDep,
    types: Annotated[list[str] | None, Query(alias="type")] = None,
):
    return _list_page(request, repository, None, types)


@router.get("/{type_name}/all")
def list_type(type_name: str, request: Request, repository: RepositoryDep):
    return _list_page(request, repository, type_name, None)


@router.get("/{type_name}/autocomplete")
def autocomplete(
    type_name: str,
    repository: RepositoryDep,
    keyword: str | None = None,
    publishing_group: Annotated[str | None, Query(alias="publishingGroup")] = None,
    channel: str | None = None,
):
    hits = repository.autocomplete(
        type_name,
        {"keyword": keyword, "publishingGroup": publishing_group, "channel": channel},
    )
    return {"items": [_dump(h) for h in hits]}


@router.post("/{type_name}/search")
def search_type(type_name: str, repository: RepositoryDep, query: OptionalJsonBody = None):
    return _dump(repository.search(query, type_name))


# ── Working copies ───────────────────────────────────────────────


@router.get("/{type_name}/{entity_id}/working-copy")
def get_working_copy(type_name: str, entity_id: str, repository: RepositoryDep):
    return repository.get_working_copy(type_name, entity_id)


@router.put("/{type_name}/{entity_id}/working-copy")
def put_working_copy(type_name: str, entity_id: str, body: JsonBody, repository: RepositoryDep):
    return repository.put_working_copy(type_name, entity_id, body)


@router.delete("/{type_name}/{entity_id}/working-copy")
def delete_working_copy(type_name: str, entity_id: str, repository: RepositoryDep):
    repository.delete_working_copy(type_name, entity_id)


# ── References and versions ──────────────────────────────────────


@router.get("/{type_name}/{entity_id}/referenced-by")
def referenced_by(type_name: str, entity_id: str, repository: RepositoryDep):
    return [r.to_wire() for r in repository.referenced_by(type_name, entity_id)]


@router.get("/{type_name}/{entity_id}/versions")
def list_versions(type_name: str, entity_id: str, repository: RepositoryDep):
    return [v.to_wire() for v in repository.list_versions(type_name, entity_id)]


@router.get("/{type_name}/{entity_id}/versions/{seq}")
def get_version(type_name: str, entity_id: str, seq: int, response: Response, repository: RepositoryDep):
    record = repository.get_version(type_name, entity_id, seq)
    response.headers["sequence-number"] = str(record.sequence_number)
    return record.content


# ── Content ──────────────────────────────────────────────────────


@router.get("/{type_name}/{entity_id}")
def get_content(type_name: str, entity_id: str, response: Response, repository: RepositoryDep):
    record = repository.get(type_name, entity_id)
    response.headers["sequence-number"] = str(record.sequence_number)
    if repository.has_working_copy(type_name, entity_id):
        response.headers["has-working-copy"] = "true"
    return record.content


@router.put("/{type_name}/{entity_id}")
def put_content(
    type_name: str,
    entity_id: str,
    body: JsonBody,
    response: Response,
    repository: RepositoryDep,
    if_sequence_number: Annotated[int | None, Query(alias="ifSequenceNumber")] = None,
    clear_working_copy: Annotated[bool | None, Query(alias="clearWorkingCopy")] = None,
):
    record = repository.put(
        type_name,
        entity_id,
        body,
        if_sequence_number=if_sequence_number,
        clear_working_copy=clear_working_copy,
    )
    response.headers["sequence-number"] = str(record.sequence_number)
    return record.content


@router.delete("/{type_name}/{entity_id}")
def delete_content(type_name: str, entity_id: str, repository: RepositoryDep):
    repository.delete(type_name, entity_id)
