from docker_prebuilt.main import cli

cli()
