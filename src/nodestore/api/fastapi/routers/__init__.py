from nodestore.api.fastapi.routers import documents

__all__ = ["documents"]
