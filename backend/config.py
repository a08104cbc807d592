"""Configuration management."""
import os
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()


class Config:
    """Application configuration."""

    # BPMN document metadata
    PROCESS_NAME: str = os.getenv("BPMN_PROCESS_NAME", "ReactFlow Process")
    EXPORTER_NAME: str = os.getenv("BPMN_EXPORTER_NAME", "ReactFlow to Camunda")
    EXPORTER_VERSION: str = os.getenv("BPMN_EXPORTER_VERSION", "1.0")
    EXECUTION_PLATFORM: str = os.getenv("BPMN_EXECUTION_PLATFORM", "Camunda Cloud")
    EXECUTION_PLATFORM_VERSION: str = os.getenv("BPMN_EXECUTION_PLATFORM_VERSION", "8.0.0")

    # Server
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    PORT: int = int(os.getenv("PORT", "8000"))
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv(
            "CORS_ORIGINS",
            "http://localhost:5173,http://localhost:5174,http://localhost:3000,http://localhost:8000",
        ).split(",")
        if origin.strip()
    ]
