from lectro.cli.vectors import main

main()
