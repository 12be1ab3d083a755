from gitoops.cli.main import cli

cli()
