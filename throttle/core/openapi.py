"""OpenAPI customization utilities.

Adds the admin API key security scheme (``X-API-Key``) and applies it only to
admin operations, plus tags metadata.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_ADMIN_METHODS = {"delete"}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add metadata and security.

    - Injects components.securitySchemes for admin API key auth
    - Marks DELETE /v1/throttle/{identity} as requiring the key
    - Adds tags metadata if not present
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminApiKey",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "Admin key for resetting throttles.",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {
                "name": "Throttle",
                "description": "Throttle status, guarded probe and admin reset.",
            },
            {
                "name": "Health",
                "description": "Liveness checks.",
            },
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            if not path.startswith("/v1/throttle/{"):
                continue
            for method, method_obj in methods.items():
                if method in _ADMIN_METHODS and isinstance(method_obj, dict):
                    method_obj["security"] = [{"AdminApiKey": []}]

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
