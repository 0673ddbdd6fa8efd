from phototool.core import main

main()
