"""
Configuration management for the orderpay CLI.
Handles loading and validating configuration from environment variables and files.
"""

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

VALID_OUTPUT_FORMATS = ['text', 'json', 'csv']

@dataclass
class Config:
    """Configuration settings for the orderpay CLI."""
    
    # Database settings
    database_url: str
    
    # Logging settings
    log_level: str = 'INFO'
    
    # Output settings
    output_format: str = 'text'  # text, json, csv
    currency_symbol: str = '€'
    
    # Receipt settings
    default_tax_rate: int = 10
    
    @classmethod
    def from_env(cls, env_file: Optional[Path] = None, require_database: bool = True) -> 'Config':
        """Create configuration from environment variables.
        
        Args:
            env_file: Optional path to .env file
            require_database: Fail when DATABASE_URL is missing
            
        Returns:
            Config: Configuration instance
            
        Raises:
            ValueError: If required environment variables are missing
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()
            
        database_url = os.getenv('DATABASE_URL', '')
        if require_database and not database_url:
            raise ValueError("DATABASE_URL environment variable is required")
            
        return cls(
            database_url=database_url,
            log_level=os.getenv('LOG_LEVEL', 'INFO'),
            output_format=os.getenv('OUTPUT_FORMAT', 'text'),
            currency_symbol=os.getenv('CURRENCY_SYMBOL', '€'),
            default_tax_rate=int(os.getenv('DEFAULT_TAX_RATE', '10'))
        )
    
    def validate(self) -> bool:
        """Validate configuration settings.
        
        Returns:
            bool: True if configuration is valid
        """
        if self.default_tax_rate < 0:
            raise ValueError("default_tax_rate cannot be negative")
            
        if self.output_format not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of: {', '.join(VALID_OUTPUT_FORMATS)}")
            
        return True
