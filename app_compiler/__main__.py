from app_compiler.cli.main import app

app()
