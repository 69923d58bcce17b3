from tunexport.cli.commands import cli

cli(prog_name="tunexport")
