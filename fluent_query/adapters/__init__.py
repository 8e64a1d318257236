"""Database adapters implementing the SyncAdapter protocol."""
