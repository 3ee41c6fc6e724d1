#!/usr/bin/env python3
from dataclasses import dataclass
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Config:
    """Application configuration"""
    workspace: Path = Path(os.getenv("SITESCRAPE_WORKSPACE", "./workspace"))
    store_file: str = os.getenv("SITESCRAPE_STORE_FILE", "store.json")
    fetch_timeout: int = int(os.getenv("SITESCRAPE_FETCH_TIMEOUT", "30"))
    user_agent: str = os.getenv(
        "SITESCRAPE_USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    )
    accept_language: str = os.getenv("SITESCRAPE_ACCEPT_LANGUAGE", "en-US,en;q=0.9,es;q=0.8")
    headless: bool = os.getenv("SITESCRAPE_HEADLESS", "true").lower() == "true"
    debug: bool = os.getenv("SITESCRAPE_DEBUG", "false").lower() == "true"
    llm_provider: str = os.getenv("SITESCRAPE_LLM_PROVIDER", "openai/gpt-4o-mini")
    llm_timeout: int = int(os.getenv("SITESCRAPE_LLM_TIMEOUT", "120"))

    # Simplified HTML sent to the LLM for schema inference
    max_simplified_chars: int = int(os.getenv("SITESCRAPE_MAX_SIMPLIFIED_CHARS", "8000"))
    min_simplified_chars: int = int(os.getenv("SITESCRAPE_MIN_SIMPLIFIED_CHARS", "100"))

config = Config()
