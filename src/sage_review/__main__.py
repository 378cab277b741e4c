from sage_review.main import main

main()
