from pydantic import BaseModel, Field


class AdminConfig(BaseModel):
    """Client configuration injected into the admin page at load time."""
    rest_url: str = Field(..., description="Base URL of the jeec/v1 namespace, with trailing slash")
    auth_token: str = Field(..., description="Bearer token attached to every request")
    admin_url: str = Field("/admin/", description="Admin base URL")

    def endpoint(self, path: str) -> str:
        return self.rest_url.rstrip("/") + "/" + path.lstrip("/")
