"""Run the CLI: python -m sql2pinecone."""

from sql2pinecone.cli import app

if __name__ == "__main__":
    app()
