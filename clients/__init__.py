# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    VaultError,
    get_database_url,
    get_valkey_url,
    get_storage_config,
)
from clients.postgres_client import PostgresClient
from clients.valkey_client import ValkeyClient
from clients.storage_client import StorageClient, StorageConfig, StorageError
from clients.receipt_uploader import ReceiptFile, ReceiptUploader, ReceiptUploadError
