"""Main script for docker-retag"""
from docker_retag.cli import main

if __name__ == '__main__':
    main(prog_name='docker-retag') # pylint: disable=unexpected-keyword-arg,no-value-for-parameter
