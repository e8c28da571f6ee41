# supabase_client.py
import os

from dotenv import load_dotenv
from supabase import create_client, Client


def get_schema() -> str:
    load_dotenv()
    return os.getenv("SCHEMA", "public")


def get_supabase_client() -> Client:
    """
    Build a Supabase client from SUPABASE_URL / SUPABASE_KEY.

    Each Streamlit session gets its own client because the auth session
    lives on the client object.
    """
    load_dotenv()
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_KEY")

    if not url or not key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be set in .env or the environment")

    return create_client(url, key)
