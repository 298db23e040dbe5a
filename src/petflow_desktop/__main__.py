from petflow_desktop import main

main()
