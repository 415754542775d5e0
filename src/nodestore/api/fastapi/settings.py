from pydantic import BaseModel


class ApiConfig(BaseModel):
    title: str = "nodestore"
    version: str = "0.1.0"
    client_path: str = "/client"
    mount_client: bool = True
