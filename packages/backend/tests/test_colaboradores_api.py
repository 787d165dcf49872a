"""Collaborator and administrator API tests.

Learn: Each test creates its own data via the API and verifies the response.
The store is a fresh MemoryStore per test (see conftest.py).

Pattern: test_<verb>_<noun>_<scenario>
"""

import re

import pytest


COLABORADOR = {
    "nombre": "Ana",
    "apellidos": "López Ruiz",
    "numero_empleado": "E-1001",
    "zona_actual": "Norte",
    "contrasenia": "s3cret",
}

ADMINISTRADOR = {
    "nombre": "Luis",
    "apellidos": "Pérez",
    "correo_institucional": "luis@example.org",
    "numero_empleado": "A-01",
    "rol_admin": "supervisor",
}


@pytest.fixture
async def colaborador(client):
    """Create a collaborator and return the creation response."""
    resp = await client.post("/api/v1/colaboradores", json=COLABORADOR)
    assert resp.status_code == 201
    return resp.json()


# ═══════════════════════════════════════════════════════════
# Colaboradores
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_colaborador(client):
    """POST generates id_colaborador as 'col' + three digits."""
    resp = await client.post("/api/v1/colaboradores", json=COLABORADOR)
    assert resp.status_code == 201
    data = resp.json()
    assert data["message"] == "Colaborador created"
    assert re.fullmatch(r"col\d{3}", data["id_colaborador"])


@pytest.mark.asyncio
async def test_create_colaborador_requires_fields(client):
    """Missing required fields are rejected before touching the store."""
    body = {k: v for k, v in COLABORADOR.items() if k != "numero_empleado"}
    resp = await client.post("/api/v1/colaboradores", json=body)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_get_colaborador_by_numero_empleado(client, colaborador):
    """Lookup is by employee number; defaults are filled in and the password hidden."""
    resp = await client.get("/api/v1/colaboradores/E-1001")
    assert resp.status_code == 200
    data = resp.json()
    assert data["id_colaborador"] == colaborador["id_colaborador"]
    assert data["nombre"] == "Ana"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}", data["fecha_registro"])
    assert data["incentivos_canjeados"] == []
    assert data["registro_actividades"] == []
    assert data["notificaciones"] == []
    assert data["rutas"] == []
    assert "contrasenia" not in data
    assert data["id"]


@pytest.mark.asyncio
async def test_get_colaborador_not_found(client):
    resp = await client.get("/api/v1/colaboradores/E-404")
    assert resp.status_code == 404
    assert "E-404" in resp.json()["error"]


@pytest.mark.asyncio
async def test_list_colaboradores(client, colaborador):
    await client.post(
        "/api/v1/colaboradores", json={**COLABORADOR, "numero_empleado": "E-1002"}
    )
    resp = await client.get("/api/v1/colaboradores")
    assert resp.status_code == 200
    numbers = sorted(c["numero_empleado"] for c in resp.json())
    assert numbers == ["E-1001", "E-1002"]


@pytest.mark.asyncio
async def test_update_colaborador_partial(client, colaborador):
    """Only fields that are present and non-empty are written."""
    resp = await client.put(
        "/api/v1/colaboradores/E-1001",
        json={"zona_actual": "Sur", "nombre": ""},
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Colaborador updated", "numero_empleado": "E-1001"}

    data = (await client.get("/api/v1/colaboradores/E-1001")).json()
    assert data["zona_actual"] == "Sur"
    assert data["nombre"] == "Ana"


@pytest.mark.asyncio
async def test_update_colaborador_renames_numero_empleado(client, colaborador):
    """nuevo_numero_empleado moves the collaborator to a new key."""
    resp = await client.put(
        "/api/v1/colaboradores/E-1001",
        json={"nuevo_numero_empleado": "E-2001"},
    )
    assert resp.status_code == 200
    assert resp.json()["numero_empleado"] == "E-2001"

    assert (await client.get("/api/v1/colaboradores/E-1001")).status_code == 404
    moved = await client.get("/api/v1/colaboradores/E-2001")
    assert moved.status_code == 200
    assert "nuevo_numero_empleado" not in moved.json()


@pytest.mark.asyncio
async def test_update_colaborador_applies_to_every_match(client, store):
    """Duplicate employee numbers are all updated together."""
    await client.post("/api/v1/colaboradores", json=COLABORADOR)
    await client.post("/api/v1/colaboradores", json=COLABORADOR)

    resp = await client.put("/api/v1/colaboradores/E-1001", json={"zona_actual": "Centro"})
    assert resp.status_code == 200

    docs = await store.find_by_field("colaboradores", "numero_empleado", "E-1001")
    assert len(docs) == 2
    assert {d.data["zona_actual"] for d in docs} == {"Centro"}


@pytest.mark.asyncio
async def test_update_colaborador_not_found(client):
    resp = await client.put("/api/v1/colaboradores/E-404", json={"nombre": "X"})
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_colaborador(client, colaborador):
    resp = await client.delete("/api/v1/colaboradores/E-1001")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Colaborador deleted", "numero_empleado": "E-1001"}
    assert (await client.get("/api/v1/colaboradores/E-1001")).status_code == 404


@pytest.mark.asyncio
async def test_delete_colaborador_not_found(client):
    resp = await client.delete("/api/v1/colaboradores/E-404")
    assert resp.status_code == 404


# ═══════════════════════════════════════════════════════════
# Administradores
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_administrador_starts_active(client):
    resp = await client.post("/api/v1/administradores", json=ADMINISTRADOR)
    assert resp.status_code == 201
    id_admin = resp.json()["id_admin"]
    assert re.fullmatch(r"admin\d{3}", id_admin)

    data = (await client.get(f"/api/v1/administradores/{id_admin}")).json()
    assert data["estado"] == "activo"
    assert data["registro_actividades"] == []
    assert data["correo_institucional"] == "luis@example.org"


@pytest.mark.asyncio
async def test_update_and_delete_administrador(client):
    id_admin = (await client.post("/api/v1/administradores", json=ADMINISTRADOR)).json()["id_admin"]

    resp = await client.put(f"/api/v1/administradores/{id_admin}", json={"estado": "inactivo"})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Administrador updated", "id_admin": id_admin}
    data = (await client.get(f"/api/v1/administradores/{id_admin}")).json()
    assert data["estado"] == "inactivo"

    resp = await client.delete(f"/api/v1/administradores/{id_admin}")
    assert resp.status_code == 200
    assert (await client.get(f"/api/v1/administradores/{id_admin}")).status_code == 404


@pytest.mark.asyncio
async def test_list_administradores_empty(client):
    resp = await client.get("/api/v1/administradores")
    assert resp.status_code == 200
    assert resp.json() == []
