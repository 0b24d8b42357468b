import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from memories.core import config
from memories.core.errors import register_exception_handlers
from memories.api.v1 import auth
from memories.db.base import Base
from memories.db.session import engine
from memories.db import models  # noqa: F401  registers every table on Base.metadata
from memories.routers import post
from memories.routers import like
from memories.routers import comment
from memories.routers import admin

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Memories API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)


@app.get("/")
def read_root():
    return {"message": "Memories API is running!"}


app.include_router(auth.router, prefix="/auth", tags=["Auth"])
app.include_router(post.router, prefix="/posts", tags=["Posts"])
app.include_router(like.router, prefix="/posts", tags=["Likes"])
app.include_router(comment.router, prefix="/posts", tags=["Comments"])
app.include_router(admin.router, prefix="/admin", tags=["Admin"])

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
