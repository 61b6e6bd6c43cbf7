from create_fullstack.pipeline import main

main()
