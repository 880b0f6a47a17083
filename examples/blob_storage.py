import asyncio
import os
import uuid

from dotenv import load_dotenv

from azure_oss_storage import AsyncBlobContainerClient, BlobContainerClient
from azure_oss_storage.blob import BlobPrefix

load_dotenv()


async def main() -> None:
    connection_string = os.getenv("AZURE_STORAGE_CONNECTION_STRING")
    assert connection_string, "Set AZURE_STORAGE_CONNECTION_STRING"

    container_name = f"examples-{uuid.uuid4().hex[:8]}"

    # Instantiate clients
    container = AsyncBlobContainerClient.from_connection_string(connection_string, container_name)
    container_sync = BlobContainerClient.from_connection_string(connection_string, container_name)

    # 1) Create the container (safe to repeat)
    await container.create_if_not_exists()
    print("container:", container.uri, "exists:", await container.exists())

    # 2) Upload a few blobs (async client)
    for name in ["hello.txt", "assets/a.txt", "assets/b.txt"]:
        await container.get_blob_client(name).upload(f"hello from {name}")
    print("uploaded 3 blobs")

    # 3) Read one back and show its properties
    hello = container.get_blob_client("hello.txt")
    print("content:", (await hello.download_content()).decode())
    props = await hello.get_properties()
    print("properties:", props.content_type, props.content_length, props.last_modified)

    # 4) Flat listing (sync client, follows continuation markers)
    for blob in container_sync.get_blobs():
        print(" -", blob.name, blob.properties.content_length)

    # 5) Hierarchical listing: blobs and virtual directories at the top level
    async for item in container.get_blobs_by_hierarchy():
        kind = "dir " if isinstance(item, BlobPrefix) else "blob"
        print(f" {kind}", item.name)

    # 6) Clean up
    await container.delete_if_exists()
    print("container deleted:", not container_sync.exists())

    await container.aclose()
    container_sync.close()


if __name__ == "__main__":
    asyncio.run(main())
