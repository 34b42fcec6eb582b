def test_operation_security(client):
    """Test that the schema marks which operations need the session cookie and the CSRF header."""
    schema = client.get("/openapi.json").json()
    paths = schema["paths"]

    assert set(schema["components"]["securitySchemes"]) == {"AuthTokenCookie", "CsrfHeader"}
    assert paths["/api/auth/login"]["post"]["security"] == []
    assert paths["/api/notes"]["get"]["security"] == [{"AuthTokenCookie": []}]
    assert paths["/api/notes"]["post"]["security"] == [{"AuthTokenCookie": [], "CsrfHeader": []}]
    assert paths["/api/notes/{note_id}"]["delete"]["security"] == [{"AuthTokenCookie": [], "CsrfHeader": []}]
    assert paths["/api/auth/me"]["get"]["security"] == [{"AuthTokenCookie": []}]
