from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from products_manager.admin.config import AdminConfig
from products_manager.admin.templating import env
from products_manager.config import get_settings
from products_manager.models.user import User
from products_manager.services.user_setup import should_show_admin_bar
from products_manager.utils.security import create_access_token, require_edit_capability

router = APIRouter()
templates = Jinja2Templates(env=env)


@router.get("/admin/products-manager", response_class=HTMLResponse)
def products_manager_page(request: Request, user: User = Depends(require_edit_capability)):
    """Render the Products Manager shell with the client configuration the admin app reads on load."""
    config = AdminConfig(
        rest_url=str(request.base_url) + "jeec/v1/",
        auth_token=create_access_token(subject=user.user_login),
        admin_url=get_settings().ADMIN_URL,
    )
    return templates.TemplateResponse(
        request,
        "admin/page.html",
        {"config": config.model_dump(), "user": user, "show_admin_bar": should_show_admin_bar(user)},
    )
