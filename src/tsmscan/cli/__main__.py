from tsmscan.cli.main import app

app(prog_name="tsmscan")
