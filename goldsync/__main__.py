from goldsync.cli import app

app()
