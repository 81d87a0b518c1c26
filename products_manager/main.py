from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
import logging
from products_manager.config import get_settings
from products_manager.routers import admin_page, auth, categories, media, products
from products_manager.utils.errors import RestError, rest_error_handler
from products_manager.utils.storage import MEDIA_ROOT

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

API_NAMESPACE = "/jeec/v1"

app = FastAPI(title="Products Manager", version="1.0.0")


def create_tables():
    from products_manager.models.user import Base, engine  # Base/engine single source
    import products_manager.models.product  # register Product model
    import products_manager.models.category  # register Category model
    import products_manager.models.media  # register Media model
    Base.metadata.create_all(bind=engine)


@app.on_event("startup")
def on_startup():
    create_tables()
    if settings.PROVISION_TEST_USER:
        from products_manager.models.user import SessionLocal
        from products_manager.services.user_setup import provision_test_user
        db = SessionLocal()
        try:
            provision_test_user(db)
        finally:
            db.close()
    logger.info("Products Manager ready, REST namespace %s", API_NAMESPACE)


app.add_exception_handler(RestError, rest_error_handler)

# Ensure media directory exists before mounting
MEDIA_ROOT.mkdir(parents=True, exist_ok=True)

# Serve uploaded media files
app.mount("/media", StaticFiles(directory=str(MEDIA_ROOT)), name="media")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-WP-Total", "X-WP-TotalPages"],
)

# Include routers
app.include_router(products.router, prefix=API_NAMESPACE, tags=["products"])
app.include_router(categories.router, prefix=API_NAMESPACE, tags=["product-categories"])
app.include_router(media.router, prefix=API_NAMESPACE, tags=["media"])
app.include_router(auth.router, prefix=API_NAMESPACE, tags=["auth"])
app.include_router(admin_page.router, tags=["admin"])


# --- Entry point for local runs ---
if __name__ == "__main__":
    import uvicorn, os
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("products_manager.main:app", host="0.0.0.0", port=port, reload=False)
