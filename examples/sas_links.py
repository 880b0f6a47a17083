import os
from datetime import datetime, timedelta, timezone

import httpx
from dotenv import load_dotenv

from azure_oss_storage import BlobContainerClient, BlobSasBuilder, BlobSasPermissions

load_dotenv()


def main() -> None:
    connection_string = os.getenv("AZURE_STORAGE_CONNECTION_STRING")
    assert connection_string, "Set AZURE_STORAGE_CONNECTION_STRING"

    with BlobContainerClient.from_connection_string(connection_string, "sas-examples") as container:
        container.create_if_not_exists()
        blob = container.get_blob_client("report.txt")
        blob.upload("quarterly numbers")

        if not blob.can_generate_sas_uri():
            print("connection string has no account key; cannot sign SAS URIs")
            return

        expires_on = datetime.now(timezone.utc) + timedelta(minutes=15)

        # Read-only link to a single blob
        blob_link = blob.generate_sas_uri(
            BlobSasBuilder(permissions=BlobSasPermissions(read=True), expires_on=expires_on)
        )
        print("blob link:", blob_link)
        print("anonymous GET:", httpx.get(blob_link).text)

        # Read + list link for the whole container
        container_link = container.generate_sas_uri(
            BlobSasBuilder(permissions="rl", expires_on=expires_on)
        )
        print("container link:", container_link)

        # A client built from the SAS URI alone needs no credential
        with BlobContainerClient(container_link) as readonly:
            print("names via SAS:", [b.name for b in readonly.get_blobs()])

        container.delete()


if __name__ == "__main__":
    main()
