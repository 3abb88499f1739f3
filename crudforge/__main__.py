from crudforge.cli import main

main()
