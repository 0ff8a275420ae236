from offer_finder.cli import main

main()
