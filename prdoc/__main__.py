from prdoc.cli.app import main

main()
