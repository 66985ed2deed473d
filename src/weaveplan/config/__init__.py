"""Configuration — pydantic section models, settings sources, logging setup."""
