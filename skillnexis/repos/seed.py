# repos/seed.py
import logging

from skillnexis.repos.admin_data import AdminDataManager

logger = logging.getLogger(__name__)

SAMPLE_COURSES = [
    {
        "title": "C Programming",
        "slug": "c-programming",
        "description": "Master the fundamentals of C programming language with hands-on projects and real-world applications.",
        "category": "Programming",
        "videoUrl": "https://www.youtube.com/embed/KJgsSFOSQv0",
        "pdfUrl": "https://www.tutorialspoint.com/cprogramming/cprogramming_tutorial.pdf",
    },
    {
        "title": "C++",
        "slug": "cpp",
        "description": "Deep dive into object-oriented programming with C++ and build advanced applications.",
        "category": "Programming",
        "videoUrl": "https://www.youtube.com/embed/vLnPwxZdW4Y",
        "pdfUrl": "https://www.tutorialspoint.com/cplusplus/cplusplus_tutorial.pdf",
    },
    {
        "title": "PYTHON",
        "slug": "python",
        "description": "Learn Python from scratch to advanced concepts including data structures, algorithms, and frameworks.",
        "category": "Programming",
        "videoUrl": "https://www.youtube.com/embed/rfscVS0vtbw",
        "pdfUrl": "https://www.tutorialspoint.com/python/python_tutorial.pdf",
    },
    {
        "title": "Web Development (HTML, CSS, JavaScript)",
        "slug": "web-development",
        "description": "Build responsive websites using HTML, CSS, and JavaScript with modern development practices.",
        "category": "Web Development",
        "videoUrl": "https://www.youtube.com/embed/zJSY8tbf_ys",
        "pdfUrl": "https://www.tutorialspoint.com/html/html_tutorial.pdf",
    },
    {
        "title": "Data Science with Python",
        "slug": "data-science-python",
        "description": "Analyze data and build predictive models using Python libraries like Pandas, NumPy, and Scikit-learn.",
        "category": "Data Science",
        "videoUrl": "https://www.youtube.com/embed/LHBE6Q9XlzI",
        "pdfUrl": "https://www.tutorialspoint.com/python_data_science/python_data_science_tutorial.pdf",
    },
    {
        "title": "Machine Learning & AI",
        "slug": "machine-learning-ai",
        "description": "Introduction to Machine Learning algorithms and Artificial Intelligence concepts with practical implementations.",
        "category": "Data Science",
        "videoUrl": "https://www.youtube.com/embed/i_LwzRVP7bg",
        "pdfUrl": "https://www.tutorialspoint.com/machine_learning_with_python/machine_learning_with_python_tutorial.pdf",
    },
    {
        "title": "Full Stack Web Development (MERN)",
        "slug": "mern-stack",
        "description": "Become a full-stack developer with MongoDB, Express, React, and Node.js. Build complete web applications.",
        "category": "Web Development",
        "videoUrl": "https://www.youtube.com/embed/7CqJlxBYj-M",
        "pdfUrl": "https://www.tutorialspoint.com/mern_stack/mern_stack_tutorial.pdf",
    },
    {
        "title": "Java Programming (OOP + Projects)",
        "slug": "java-programming",
        "description": "Learn Java with a focus on Object-Oriented Programming and real-world projects including enterprise applications.",
        "category": "Programming",
        "videoUrl": "https://www.youtube.com/embed/A74TOX803D0",
        "pdfUrl": "https://www.tutorialspoint.com/java/java_tutorial.pdf",
    },
    {
        "title": "Data Structures & Algorithms (DSA)",
        "slug": "dsa",
        "description": "Master DSA to crack coding interviews and optimize code performance with comprehensive problem-solving techniques.",
        "category": "Programming",
        "videoUrl": "https://www.youtube.com/embed/8hly31xKli0",
        "pdfUrl": "https://www.tutorialspoint.com/data_structures_algorithms/data_structures_algorithms_tutorial.pdf",
    },
    {
        "title": "Mobile App Development (Flutter)",
        "slug": "flutter-development",
        "description": "Build cross-platform mobile apps using Flutter and Dart for both iOS and Android platforms.",
        "category": "Mobile",
        "videoUrl": "https://www.youtube.com/embed/VPvVD8t02U8",
        "pdfUrl": "https://www.tutorialspoint.com/flutter/flutter_tutorial.pdf",
    },
    {
        "title": "Cloud Computing with AWS",
        "slug": "aws-cloud",
        "description": "Learn cloud computing concepts and services on AWS including EC2, S3, Lambda, and deployment strategies.",
        "category": "Cloud & IoT",
        "videoUrl": "https://www.youtube.com/embed/3hLmDS179YE",
        "pdfUrl": "https://www.tutorialspoint.com/amazon_web_services/amazon_web_services_tutorial.pdf",
    },
    {
        "title": "Data Analyst",
        "slug": "data-analyst",
        "description": "Learn data analysis techniques and tools including Excel, SQL, and statistical analysis for business insights.",
        "category": "Data Science",
        "videoUrl": "https://www.youtube.com/embed/r-uOLxNrNk8",
        "pdfUrl": "https://www.tutorialspoint.com/data_analysis/data_analysis_tutorial.pdf",
    },
    {
        "title": "Power BI",
        "slug": "power-bi",
        "description": "Visualize data and share insights with Power BI. Create interactive dashboards and business intelligence reports.",
        "category": "Data Science",
        "videoUrl": "https://www.youtube.com/embed/AGrl-H87pRU",
        "pdfUrl": "https://www.tutorialspoint.com/power_bi/power_bi_tutorial.pdf",
    },
]


def _q(qid, question, options, answer, explanation):
    return {"id": qid, "question": question, "options": options, "correctAnswer": answer, "explanation": explanation}


SAMPLE_QUIZZES = [
    {
        "courseSlug": "c-programming",
        "questions": [
            _q(1, "What is the correct way to declare a variable in C?",
               ["var x = 5;", "int x = 5;", "x = 5;", "declare x = 5;"], 1,
               'In C, variables must be declared with their data type. "int x = 5;" correctly declares an integer variable.'),
            _q(2, "Which header file is required for printf() function?",
               ["<stdlib.h>", "<string.h>", "<stdio.h>", "<math.h>"], 2,
               "The printf() function is declared in <stdio.h> (standard input/output header)."),
            _q(3, "What is the size of int data type in C (on most systems)?",
               ["2 bytes", "4 bytes", "8 bytes", "1 byte"], 1,
               "On most modern systems, int is 4 bytes (32 bits)."),
        ],
    },
    {
        "courseSlug": "cpp",
        "questions": [
            _q(1, "Which of the following is a feature of Object-Oriented Programming?",
               ["Encapsulation", "Inheritance", "Polymorphism", "All of the above"], 3,
               "OOP includes all these features: Encapsulation, Inheritance, and Polymorphism."),
            _q(2, "What is the correct syntax for creating a class in C++?",
               ["class MyClass {}", "Class MyClass {}", "create class MyClass {}", "new class MyClass {}"], 0,
               'In C++, classes are declared using the "class" keyword followed by the class name and curly braces.'),
        ],
    },
    {
        "courseSlug": "python",
        "questions": [
            _q(1, "Which of the following is the correct way to create a list in Python?",
               ['list = []', 'list = ()', 'list = {}', 'list = ""'], 0,
               "Square brackets [] are used to create lists in Python."),
            _q(2, "What is the output of print(type([]))?",
               ['<class "list">', '<class "array">', '<class "tuple">', '<class "dict">'], 0,
               'Empty square brackets create a list object, so type([]) returns <class "list">.'),
        ],
    },
    {
        "courseSlug": "web-development",
        "questions": [
            _q(1, "Which HTML tag is used to create a hyperlink?",
               ["<link>", "<a>", "<href>", "<url>"], 1,
               "The <a> tag with href attribute is used to create hyperlinks in HTML."),
            _q(2, "Which CSS property is used to change the text color?",
               ["font-color", "text-color", "color", "foreground-color"], 2,
               'The "color" property in CSS is used to set the text color.'),
        ],
    },
    {
        "courseSlug": "java-programming",
        "questions": [
            _q(1, "Which keyword is used to create a class in Java?",
               ["class", "Class", "create", "new"], 0,
               'The "class" keyword is used to declare a class in Java.'),
            _q(2, "What is the main method signature in Java?",
               ["public static void main(String args[])", "public void main(String args[])",
                "static void main(String args[])", "void main(String args[])"], 0,
               "The main method must be public, static, void, and take String array as parameter."),
        ],
    },
]


def seed_sample_data(manager: AdminDataManager) -> bool:
    """Load the catalogue when the store has no courses yet. Returns True if seeded."""
    if manager.get_courses():
        return False
    with manager.transaction():
        for course in SAMPLE_COURSES:
            manager.add_course(course)
        for quiz in SAMPLE_QUIZZES:
            manager.add_quiz(quiz)
    logger.info(f"Seeded {len(SAMPLE_COURSES)} courses and {len(SAMPLE_QUIZZES)} quizzes")
    return True
