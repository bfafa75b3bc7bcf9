from doccy.cli import app

app()
