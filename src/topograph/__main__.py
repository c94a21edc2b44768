from topograph._cli.main import main

main()
