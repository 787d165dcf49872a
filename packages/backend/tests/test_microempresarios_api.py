"""Microentrepreneur API tests."""

import re

import pytest


MICROEMPRESARIO = {
    "nombre": "Rosa",
    "apellidos": "Hernández",
    "telefono": "5512345678",
    "correo_electronico": "rosa@example.org",
    "nombre_negocio": "Tortillería Rosa",
    "tipo_negocio": "alimentos",
    "ubicacion": {
        "estado": "CDMX",
        "municipio": "Coyoacán",
        "colonia": "Centro",
        "codigo_postal": "04000",
        "calle": "Hidalgo",
        "numero_edificio": "12",
    },
    "coordenadas_geograficas": {"latitud": 19.35, "longitud": -99.16},
}


@pytest.fixture
async def id_microempresario(client):
    resp = await client.post("/api/v1/microempresarios", json=MICROEMPRESARIO)
    assert resp.status_code == 201
    return resp.json()["id_microempresario"]


@pytest.mark.asyncio
async def test_create_microempresario(client):
    resp = await client.post("/api/v1/microempresarios", json=MICROEMPRESARIO)
    assert resp.status_code == 201
    data = resp.json()
    assert data["message"] == "Microempresario created"
    assert re.fullmatch(r"me\d{3}", data["id_microempresario"])


@pytest.mark.asyncio
async def test_get_microempresario(client, id_microempresario):
    resp = await client.get(f"/api/v1/microempresarios/{id_microempresario}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["nombre_negocio"] == "Tortillería Rosa"
    assert data["ubicacion"]["municipio"] == "Coyoacán"
    assert "fecha_registro" in data


@pytest.mark.asyncio
async def test_update_microempresario_merges_nested_fields(client, id_microempresario):
    """Sub-fields left out (or empty) keep their stored value."""
    resp = await client.put(
        f"/api/v1/microempresarios/{id_microempresario}",
        json={
            "telefono": "5599999999",
            "ubicacion": {"calle": "Allende", "colonia": ""},
            "coordenadas_geograficas": {"latitud": 19.4},
        },
    )
    assert resp.status_code == 200
    assert resp.json()["id_microempresario"] == id_microempresario

    data = (await client.get(f"/api/v1/microempresarios/{id_microempresario}")).json()
    assert data["telefono"] == "5599999999"
    assert data["ubicacion"]["calle"] == "Allende"
    assert data["ubicacion"]["colonia"] == "Centro"
    assert data["ubicacion"]["codigo_postal"] == "04000"
    assert data["coordenadas_geograficas"] == {"latitud": 19.4, "longitud": -99.16}


@pytest.mark.asyncio
async def test_update_microempresario_not_found(client):
    resp = await client.put("/api/v1/microempresarios/me000", json={"telefono": "1"})
    assert resp.status_code == 404
    assert "me000" in resp.json()["error"]


@pytest.mark.asyncio
async def test_delete_microempresario(client, id_microempresario):
    resp = await client.delete(f"/api/v1/microempresarios/{id_microempresario}")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Microempresario deleted"

    resp = await client.get("/api/v1/microempresarios")
    assert resp.json() == []
