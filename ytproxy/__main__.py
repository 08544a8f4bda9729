from ytproxy.server import main

main()
